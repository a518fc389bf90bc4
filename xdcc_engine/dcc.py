"""DCC SEND offer parsing.

Grammar of the CTCP payload handled here::

    DCC SEND <filename> <address> <port> [<filesize>] [<token>...]

``<filename>`` is either one whitespace-free token or a double-quoted string
in which ``\\"`` and ``\\\\`` stand for a literal quote and backslash.
``<address>`` is a decimal network-order IPv4 integer or an IPv4/IPv6
literal. Tokens after the filesize (resume markers, passive-DCC tokens) are
ignored.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

from .errors import DccParseError, ParseReason

MAX_PORT = 0xFFFF
MAX_IPV4_INT = 0xFFFFFFFF
MAX_FILESIZE = 0xFFFFFFFFFFFFFFFF

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True, slots=True)
class DccOffer:
    """A file transfer endpoint offered by a bot.

    ``filesize`` is whatever the bot reported; when the bot left it out it is
    0 and ``filesize_known`` is False.
    """

    filename: str
    address: IPAddress
    port: int
    filesize: int
    filesize_known: bool = True

    @property
    def is_passive(self) -> bool:
        """Port 0 means the bot wants the receiver to listen (reverse DCC)."""
        return self.port == 0

    @property
    def endpoint(self) -> tuple[str, int]:
        return str(self.address), self.port


def is_dcc_send(payload: str) -> bool:
    tokens = payload.split(None, 2)
    return (
        len(tokens) >= 2 and tokens[0].upper() == "DCC" and tokens[1].upper() == "SEND"
    )


def parse_dcc_send(payload: str) -> DccOffer:
    """Parse the unwrapped CTCP payload of a DCC SEND offer.

    Raises:
        DccParseError: with the :class:`ParseReason` of the first problem found.
            No partial offer is ever returned.
    """
    if not is_dcc_send(payload):
        raise DccParseError(ParseReason.NOT_DCC_SEND, payload)
    tokens = payload.split(None, 2)
    remainder = tokens[2] if len(tokens) > 2 else ""

    filename, remainder = _split_filename(remainder, payload)
    fields = remainder.split()
    if not fields:
        raise DccParseError(ParseReason.MISSING_FIELD, payload, detail="address")
    if len(fields) < 2:
        raise DccParseError(ParseReason.MISSING_FIELD, payload, detail="port")

    address = _parse_address(fields[0], payload)
    port = _parse_port(fields[1], payload)
    if len(fields) < 3:
        return DccOffer(
            filename=filename, address=address, port=port, filesize=0, filesize_known=False
        )
    return DccOffer(
        filename=filename,
        address=address,
        port=port,
        filesize=_parse_filesize(fields[2], payload),
    )


def _split_filename(text: str, payload: str) -> tuple[str, str]:
    text = text.lstrip()
    if not text:
        raise DccParseError(ParseReason.MISSING_FIELD, payload, detail="filename")
    if not text.startswith('"'):
        name, *rest = text.split(None, 1)
        return name, rest[0] if rest else ""

    chars: list[str] = []
    index = 1
    while index < len(text):
        ch = text[index]
        if ch == "\\" and text[index + 1 : index + 2] in ('"', "\\"):
            chars.append(text[index + 1])
            index += 2
            continue
        if ch == '"':
            if not chars:
                raise DccParseError(
                    ParseReason.MISSING_FIELD, payload, detail="empty filename"
                )
            return "".join(chars), text[index + 1 :]
        chars.append(ch)
        index += 1
    raise DccParseError(ParseReason.UNTERMINATED_QUOTE, payload)


def _is_decimal(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _parse_address(token: str, payload: str) -> IPAddress:
    if _is_decimal(token):
        value = int(token)
        if value > MAX_IPV4_INT:
            raise DccParseError(ParseReason.ADDRESS_OUT_OF_RANGE, payload, detail=token)
        return ipaddress.IPv4Address(value)
    try:
        return ipaddress.ip_address(token)
    except ValueError:
        raise DccParseError(ParseReason.INVALID_ADDRESS, payload, detail=token) from None


def _parse_port(token: str, payload: str) -> int:
    if not _is_decimal(token):
        raise DccParseError(ParseReason.INVALID_PORT, payload, detail=token)
    port = int(token)
    if port > MAX_PORT:
        raise DccParseError(ParseReason.PORT_OUT_OF_RANGE, payload, detail=token)
    return port


def _parse_filesize(token: str, payload: str) -> int:
    if not _is_decimal(token):
        raise DccParseError(ParseReason.INVALID_SIZE, payload, detail=token)
    size = int(token)
    if size > MAX_FILESIZE:
        raise DccParseError(ParseReason.SIZE_OUT_OF_RANGE, payload, detail=token)
    return size
