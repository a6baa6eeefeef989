"""Web IRC client core: protocol engine over a WebSocket transport."""

__version__ = "0.1.0"
