from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from webirc.config import (
    SessionConfig,
    default_config_path,
    load_raw,
    load_server_configs,
    select_server,
)
from webirc.constants import DEFAULT_PORT, DEFAULT_QUIT_MESSAGE
from webirc.errors import ConfigError


def test_identity_defaults_follow_nick():
    cfg = SessionConfig.from_dict({"host": " irc.example.org ", "nick": " Guest "})
    assert cfg.host == "irc.example.org"
    assert cfg.nick == "Guest"
    assert cfg.username == "Guest"
    assert cfg.realname == "Guest"
    assert cfg.name == "irc.example.org"
    assert cfg.port == DEFAULT_PORT
    assert cfg.password is None
    assert cfg.channels == ()
    assert cfg.quit_message == DEFAULT_QUIT_MESSAGE


def test_channels_deduplicated_in_order():
    cfg = SessionConfig.from_dict(
        {"host": "h", "nick": "n", "channels": [" #B", "#a", "#b", "", "  ", "&local"]}
    )
    assert cfg.channels == ("#B", "#a", "&local")


def test_channels_must_be_a_list():
    with pytest.raises(ValidationError):
        SessionConfig.from_dict({"host": "h", "nick": "n", "channels": "#a"})


@pytest.mark.parametrize("nick", ["", "two words", ":colon"])
def test_invalid_nick_rejected(nick):
    with pytest.raises(ValidationError):
        SessionConfig.from_dict({"host": "h", "nick": nick})


@pytest.mark.parametrize("port", [0, 70000])
def test_port_range(port):
    with pytest.raises(ValidationError):
        SessionConfig.from_dict({"host": "h", "nick": "n", "port": port})


def test_blank_password_is_none():
    cfg = SessionConfig.from_dict({"host": "h", "nick": "n", "password": "  "})
    assert cfg.password is None


@pytest.mark.parametrize(
    ("data", "url"),
    [
        ({"host": "irc.example.org", "port": 8067}, "ws://irc.example.org:8067"),
        ({"host": "irc.example.org", "port": 443, "tls": True}, "wss://irc.example.org:443"),
        ({"host": "wss://gateway.example.org/irc"}, "wss://gateway.example.org/irc"),
    ],
)
def test_url(data, url):
    assert SessionConfig.from_dict({"nick": "n", **data}).url == url


def test_config_is_frozen():
    cfg = SessionConfig.from_dict({"host": "h", "nick": "n"})
    with pytest.raises(ValidationError):
        cfg.nick = "other"


def test_host_starting_with_ws_is_still_a_hostname():
    cfg = SessionConfig.from_dict({"host": "ws.example.org", "port": 8067, "nick": "n"})
    assert cfg.url == "ws://ws.example.org:8067"
    cfg = SessionConfig.from_dict({"host": "wss-gw.net", "port": 443, "tls": True, "nick": "n"})
    assert cfg.url == "wss://wss-gw.net:443"


def test_default_config_path_env(monkeypatch):
    monkeypatch.setenv("WEBIRC_CONF_FILE", "/tmp/custom.conf")
    assert default_config_path() == "/tmp/custom.conf"


@pytest.mark.parametrize(
    "payload",
    [
        {"host": "h", "nick": "n"},
        [{"host": "h", "nick": "n"}],
        {"servers": [{"host": "h", "nick": "n"}]},
    ],
)
def test_load_raw_shapes(tmp_path, payload):
    path = tmp_path / "webirc.conf"
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert load_raw(path) == [{"host": "h", "nick": "n"}]


def test_load_raw_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_raw(tmp_path / "absent.conf")


def test_load_raw_bad_json(tmp_path):
    path = tmp_path / "webirc.conf"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_raw(path)


def test_load_raw_wrong_shape(tmp_path):
    path = tmp_path / "webirc.conf"
    path.write_text(json.dumps(["just a string"]), encoding="utf-8")
    with pytest.raises(ConfigError, match="expected a server object"):
        load_raw(path)


def test_load_server_configs(tmp_path):
    path = tmp_path / "webirc.conf"
    path.write_text(
        json.dumps(
            {
                "servers": [
                    {"name": "main", "host": "irc.one.org", "nick": "me", "channels": ["#x"]},
                    {"host": "irc.two.org", "nick": "me2"},
                ]
            }
        ),
        encoding="utf-8",
    )
    configs = load_server_configs(path)
    assert [c.name for c in configs] == ["main", "irc.two.org"]
    assert select_server(configs, None) is configs[0]
    assert select_server(configs, "irc.two.org") is configs[1]
    assert select_server(configs, "main") is configs[0]
    assert select_server(configs, "missing") is None


def test_load_server_configs_names_bad_entry(tmp_path):
    path = tmp_path / "webirc.conf"
    path.write_text(
        json.dumps([{"host": "h", "nick": "ok"}, {"host": "h", "nick": "bad nick"}]),
        encoding="utf-8",
    )
    with pytest.raises(ConfigError, match="server #1"):
        load_server_configs(path)


def test_load_server_configs_empty(tmp_path):
    path = tmp_path / "webirc.conf"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError, match="no servers"):
        load_server_configs(path)
