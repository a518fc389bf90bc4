"""Wire encoding of outgoing commands and incremental decoding of inbound bytes."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import IRC_MAX_LINE_LENGTH
from ..errors import FormatError, ProtocolOverflowError
from .parser import CTCP_DELIMITER, IRCMessage, parse_irc_message

LINE_TERMINATOR = b"\r\n"
MAX_OUTGOING_LINE = 512  # bytes, terminator included
_FORBIDDEN = ("\r", "\n", "\0")


def format_line(command: str, *params: str) -> str:
    """Build a line (without terminator) from a command and its parameters.

    Only the final parameter may contain spaces, start with ``:`` or be
    empty; it is then sent as the trailing parameter. Any other parameter
    breaking those rules raises :class:`FormatError`.
    """
    if not command or any(c.isspace() for c in command) or command.startswith(":"):
        raise FormatError(f"invalid command token: {command!r}")
    parts = [command]
    for index, param in enumerate(params):
        if any(ch in param for ch in _FORBIDDEN):
            raise FormatError(f"parameter {index} contains a line break or NUL")
        is_last = index == len(params) - 1
        needs_trailing = not param or " " in param or param.startswith(":")
        if needs_trailing and not is_last:
            raise FormatError(
                f"parameter {index} ({param!r}) can only be sent as the trailing parameter"
            )
        parts.append(f":{param}" if needs_trailing else param)
    return " ".join(parts)


def encode_line(command: str, *params: str) -> bytes:
    data = format_line(command, *params).encode("utf-8") + LINE_TERMINATOR
    if len(data) > MAX_OUTGOING_LINE:
        raise FormatError(
            f"line is {len(data)} bytes, limit is {MAX_OUTGOING_LINE}"
        )
    return data


def ctcp_quote(payload: str) -> str:
    if CTCP_DELIMITER in payload:
        raise FormatError("CTCP payload cannot contain the CTCP delimiter")
    return f"{CTCP_DELIMITER}{payload}{CTCP_DELIMITER}"


@dataclass(frozen=True, slots=True)
class MalformedLine:
    raw: str
    reason: str


def _decode_text(line: bytes) -> str:
    # IRC has no declared encoding; latin-1 never fails and keeps every byte.
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError:
        return line.decode("latin-1")


class LineDecoder:
    """Splits a byte stream into IRC messages, keeping partial lines buffered.

    Lines end with LF; a preceding CR is dropped. Blank lines are skipped.
    When the unterminated remainder grows past ``max_line_length`` the peer
    is considered out of sync and :class:`ProtocolOverflowError` is raised.
    """

    def __init__(self, max_line_length: int = IRC_MAX_LINE_LENGTH) -> None:
        self.max_line_length = max_line_length
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, data: bytes) -> list[IRCMessage | MalformedLine]:
        self._buffer.extend(data)
        events: list[IRCMessage | MalformedLine] = []
        while (end := self._buffer.find(b"\n")) >= 0:
            line = bytes(self._buffer[:end]).removesuffix(b"\r")
            del self._buffer[: end + 1]
            if not line.strip():
                continue
            text = _decode_text(line)
            parsed = parse_irc_message(text)
            if parsed.command is None:
                events.append(MalformedLine(raw=text, reason="missing command"))
            else:
                events.append(parsed)
        if len(self._buffer) > self.max_line_length:
            size = len(self._buffer)
            self._buffer.clear()
            raise ProtocolOverflowError(
                f"{size} bytes buffered without a line terminator",
                data={"limit": self.max_line_length, "buffered": size},
            )
        return events

    def reset(self) -> None:
        self._buffer.clear()
