"""Tests for xdcc_engine/irc/codec.py."""

import pytest

from xdcc_engine.errors import FormatError, ProtocolOverflowError
from xdcc_engine.irc.codec import (
    LineDecoder,
    MalformedLine,
    ctcp_quote,
    encode_line,
    format_line,
)


def test_encode_simple_commands():
    assert encode_line("NICK", "quietfox1234") == b"NICK quietfox1234\r\n"
    assert encode_line("JOIN", "#xdcc") == b"JOIN #xdcc\r\n"
    assert encode_line("USER", "me", "0", "*", "real name") == b"USER me 0 * :real name\r\n"


def test_encode_ctcp_request():
    line = encode_line("PRIVMSG", "XdccBot", ctcp_quote("XDCC SEND 42"))
    assert line == b"PRIVMSG XdccBot :\x01XDCC SEND 42\x01\r\n"


def test_final_parameter_with_leading_colon_or_empty_is_trailing():
    assert format_line("PRIVMSG", "bot", ":)") == "PRIVMSG bot ::)"
    assert format_line("PONG", "") == "PONG :"


def test_middle_parameter_with_space_is_rejected():
    with pytest.raises(FormatError):
        format_line("PRIVMSG", "two words", "hi")


def test_middle_parameter_with_colon_is_rejected():
    with pytest.raises(FormatError):
        format_line("MODE", ":bad", "+i")


def test_line_breaks_are_rejected():
    with pytest.raises(FormatError):
        encode_line("PRIVMSG", "bot", "hi\r\nQUIT")


def test_bad_command_token_is_rejected():
    with pytest.raises(FormatError):
        encode_line("PRIV MSG", "bot")
    with pytest.raises(FormatError):
        encode_line("")


def test_overlong_line_is_rejected():
    with pytest.raises(FormatError):
        encode_line("PRIVMSG", "bot", "x" * 600)


def test_ctcp_quote_rejects_delimiter():
    with pytest.raises(FormatError):
        ctcp_quote("bad\x01payload")


@pytest.mark.parametrize(
    ("command", "params"),
    [
        ("NICK", ["quietfox1234"]),
        ("USER", ["me", "0", "*", "Real Name"]),
        ("PRIVMSG", ["XdccBot", "\x01XDCC SEND 7\x01"]),
        ("PONG", [":irc.test"]),
    ],
)
def test_decode_reproduces_encoded_line(command, params):
    decoder = LineDecoder()
    (message,) = decoder.feed(encode_line(command, *params))
    assert message.command == command
    assert message.args == params


def test_decoder_keeps_partial_lines():
    decoder = LineDecoder()
    assert decoder.feed(b":irc.test 001 me :Wel") == []
    assert decoder.pending == len(b":irc.test 001 me :Wel")
    (message,) = decoder.feed(b"come\r\nPING :x")
    assert message.command == "001"
    assert message.trailing == "Welcome"
    assert decoder.pending == len(b"PING :x")
    (ping,) = decoder.feed(b"\r\n")
    assert ping.command == "PING"
    assert decoder.pending == 0


def test_decoder_accepts_bare_lf_and_skips_blank_lines():
    decoder = LineDecoder()
    events = decoder.feed(b"PING :a\n\r\n\nPING :b\r\n")
    assert [e.trailing for e in events] == ["a", "b"]


def test_decoder_reports_missing_command_and_continues():
    decoder = LineDecoder()
    events = decoder.feed(b":prefix.only\r\n:irc.test :just trailing\r\nPING :ok\r\n")
    assert isinstance(events[0], MalformedLine)
    assert isinstance(events[1], MalformedLine)
    assert events[0].reason == "missing command"
    assert events[2].command == "PING"


def test_decoder_passes_unknown_commands_through():
    decoder = LineDecoder()
    (message,) = decoder.feed(b":irc.test 999 me :whatever\r\n")
    assert message.command == "999"
    (other,) = decoder.feed(b"FROBNICATE a b\r\n")
    assert other.command == "FROBNICATE"


def test_decoder_falls_back_to_latin1():
    decoder = LineDecoder()
    (message,) = decoder.feed(b":bot!b@h NOTICE me :caf\xe9\r\n")
    assert message.trailing == "café"


def test_decoder_overflow_is_fatal():
    decoder = LineDecoder(max_line_length=1024)
    decoder.feed(b"x" * 1000)
    with pytest.raises(ProtocolOverflowError) as excinfo:
        decoder.feed(b"y" * 100)
    assert excinfo.value.data["limit"] == 1024
    assert decoder.pending == 0


def test_decoder_overflow_ignores_complete_lines():
    decoder = LineDecoder(max_line_length=600)
    events = decoder.feed(b"PING :" + b"a" * 700 + b"\r\n")
    assert len(events) == 1
