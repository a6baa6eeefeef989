"""Tests for logging_config.py module."""

import io
import logging

import colorlog
import pytest

from webirc.logging_config import AiohttpAccessFilter, LoggerConfigurator


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    client = logging.getLogger("webirc")
    saved = (
        root.level,
        [(h, h.formatter, list(h.filters)) for h in root.handlers],
        client.level,
        list(client.handlers),
        client.propagate,
    )
    yield
    root_level, handlers, client_level, client_handlers, propagate = saved
    root.setLevel(root_level)
    for h, formatter, filters in handlers:
        h.setFormatter(formatter)
        h.filters = filters
    for h in list(root.handlers):
        if h not in [s[0] for s in handlers]:
            root.removeHandler(h)
    client.setLevel(client_level)
    client.handlers = client_handlers
    client.propagate = propagate


def _record(name: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, "", 0, "msg", (), None)


def test_aiohttp_filter():
    f = AiohttpAccessFilter()
    assert not f.filter(_record("aiohttp.websocket"))
    assert f.filter(_record("aiohttp.client"))
    assert f.filter(_record("webirc"))


def test_build_formatter_colors_levels():
    formatter = LoggerConfigurator().build_formatter()
    assert isinstance(formatter, colorlog.ColoredFormatter)
    formatted = formatter.format(_record("webirc", logging.ERROR))
    assert "\033[31m" in formatted
    assert "ERROR" in formatted


@pytest.mark.usefixtures("restore_logging")
def test_configure_info_by_default(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    level = LoggerConfigurator({"stream": io.StringIO()}).configure()
    assert level == logging.INFO
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("aiohttp").level == logging.WARNING
    client = logging.getLogger("webirc")
    assert client.handlers == []
    assert client.propagate


@pytest.mark.usefixtures("restore_logging")
def test_configure_debug_env(monkeypatch):
    monkeypatch.setenv("DEBUG", "yes")
    assert LoggerConfigurator().configure() == logging.DEBUG
    assert logging.getLogger("webirc").level == logging.DEBUG
