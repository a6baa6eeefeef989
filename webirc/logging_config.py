"""
Logging configuration for the web IRC client.

Routes every logger through one colorlog handler on the root logger; the
level comes from the ``DEBUG`` environment variable.
"""

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class AiohttpAccessFilter(logging.Filter):
    """Filter to suppress aiohttp's per-frame websocket chatter."""

    def filter(self, record):
        return not record.name.startswith("aiohttp.websocket")


class LoggerConfigurator:
    """Installs the colored root handler.

    Args:
        config: Optional dict; ``stream`` replaces stderr as the output.
    """

    def __init__(self, config=None):
        self.config = config or {}

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
        )

    def configure(self) -> int:
        """Configure root logging and return the level applied."""
        debug = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")
        log_level = logging.DEBUG if debug else logging.INFO
        formatter = self.build_formatter()
        access_filter = AiohttpAccessFilter()

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        logging.basicConfig(level=log_level, handlers=[handler])

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        for h in root_logger.handlers:
            h.setFormatter(formatter)
            h.addFilter(access_filter)

        logging.getLogger("aiohttp").setLevel(logging.WARNING)

        # the event logger's own stdout handler would print every line twice
        client_logger = logging.getLogger("webirc")
        client_logger.handlers.clear()
        client_logger.setLevel(log_level)
        client_logger.propagate = True
        return log_level
