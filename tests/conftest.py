from __future__ import annotations

import pytest

from tests.fixtures.irc_fixtures import FakeTransport, make_config
from webirc.irc.events import EVENT_TYPES, Event
from webirc.irc.session import IRCSession


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(config, transport) -> IRCSession:
    async def factory(url: str) -> FakeTransport:
        transport.url = url
        return transport

    return IRCSession(config, factory)


@pytest.fixture
def events(session) -> list[Event]:
    """Every event the session emits, in order."""
    seen: list[Event] = []
    for name in EVENT_TYPES:
        session.on(name, seen.append)
    return seen


@pytest.fixture
def connected(session, transport, events) -> IRCSession:
    """A session past transport-open with registration writes and events cleared."""
    session.handle_open(transport)
    transport.writes.clear()
    events.clear()
    return session
