from __future__ import annotations

import pytest

from webirc.irc import commands
from webirc.irc.parser import parse_line


def test_build_line_with_trailing():
    assert commands.build_line("privmsg", "#c", trailing="hi there") == "PRIVMSG #c :hi there"


def test_last_param_with_space_is_promoted_to_trailing():
    assert commands.build_line("TOPIC", "#c", "new topic") == "TOPIC #c :new topic"


def test_crlf_is_stripped_from_arguments():
    line = commands.privmsg("#c", "one\r\nQUIT :bye")
    assert "\r" not in line and "\n" not in line
    assert parse_line(line).parameters == ("#c", "one QUIT :bye")


def test_registration_lines():
    assert commands.pass_("s3cret") == "PASS s3cret"
    assert commands.nick("Guest") == "NICK Guest"
    assert commands.user("guest", "Guest User") == "USER guest 0 * :Guest User"


def test_join_with_and_without_key():
    assert commands.join("#c") == "JOIN #c"
    assert commands.join("#c", "key") == "JOIN #c key"


def test_moderation_lines():
    assert commands.mode("#c", "+b", commands.ban_mask("troll")) == "MODE #c +b troll!*@*"
    assert commands.mode("#c", "+nt") == "MODE #c +nt"
    assert commands.mode("#c", "+ov", "alice", "bob") == "MODE #c +ov alice bob"
    assert commands.kick("#c", "troll") == "KICK #c troll"


def test_pong_and_quit():
    assert commands.pong("token123") == "PONG :token123"
    assert commands.quit_("bye all") == "QUIT :bye all"


def test_action_is_ctcp_wrapped():
    assert commands.action("#c", "waves") == "PRIVMSG #c :\x01ACTION waves\x01"


def test_raw_strips_line_breaks():
    assert commands.raw("WHOIS nick\r\n") == "WHOIS nick"


@pytest.mark.parametrize(
    "line, expected",
    [
        (commands.privmsg("#chan", "hello  big world"), ("#chan", "hello  big world")),
        (commands.kick("#chan", "bob", "spamming the channel"), ("#chan", "bob", "spamming the channel")),
        (commands.part("#chan", "see you later"), ("#chan", "see you later")),
        (commands.user("guest", "Guest User"), ("guest", "0", "*", "Guest User")),
        (commands.quit_("gone for now"), ("gone for now",)),
    ],
)
def test_builders_round_trip_through_parser(line, expected):
    assert parse_line(line).parameters == expected
