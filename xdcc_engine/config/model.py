from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    IRC_DEFAULT_PORT,
    IRC_DEFAULT_TLS_PORT,
    IRC_MAX_LINE_LENGTH,
    IRC_READ_CHUNK_SIZE,
    XDCC_CONNECT_TIMEOUT,
    XDCC_NICK_RETRY_LIMIT,
    XDCC_NICKNAME_MAX_LENGTH,
    XDCC_REALNAME,
    XDCC_REQUEST_TIMEOUT,
)
from ..nickname import MIN_NICKNAME_LENGTH, SUFFIX_DIGITS, sanitize_stem

CHANNEL_PREFIXES = "#&+!"

# Replies iroffer-style bots send instead of an offer.
DEFAULT_REJECTION_PATTERNS: tuple[str, ...] = (
    r"invalid pack number",
    r"no such pack",
    r"pack not found",
    r"xdcc send denied",
    r"access denied",
    r"already requested",
    r"must be on a known channel",
    r"you (?:are|have been) banned",
)


def split_server_address(server: str, default_port: int) -> tuple[str, int]:
    """Split ``host``, ``host:port`` or ``[v6]:port`` into host and port.

    A bare IPv6 literal (several colons, no brackets) is taken as a host.

    Raises:
        ValueError: If the host is empty or the port is not in 1..65535.
    """
    server = server.strip()
    port_text: str | None = None
    if server.startswith("["):
        host, sep, tail = server[1:].partition("]")
        if not sep:
            raise ValueError(f"unterminated IPv6 literal in {server!r}")
        if tail:
            if not tail.startswith(":"):
                raise ValueError(f"unexpected text after IPv6 literal in {server!r}")
            port_text = tail[1:]
    elif server.count(":") == 1:
        host, port_text = server.split(":", 1)
    else:
        host = server
    if not host:
        raise ValueError("server host is empty")
    if port_text is None:
        return host, default_port
    if not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"invalid port {port_text!r}")
    port = int(port_text)
    if not 0 < port <= 0xFFFF:
        raise ValueError(f"port {port} out of range")
    return host, port


class EngineConfig(BaseModel):
    """Settings shared by every request an :class:`~xdcc_engine.Engine` runs.

    Attributes:
        timeout: Overall budget in seconds for one request, from connect to offer.
        connect_timeout: Upper bound for opening the connection (also capped by
            the remaining budget).
        nick_retry_limit: Fresh nicknames tried after the first one is rejected.
        nickname_prefix: Fixed stem for generated nicknames instead of words.
        nickname_max_length: Longest nickname the generator may produce.
        username: USER name; the nickname is used when unset.
        realname: USER real name.
        tls: Wrap the connection in TLS (default port becomes 6697).
        ctcp_request: Send the request as CTCP ``XDCC SEND <pack>``; when False
            a plain ``XDCC SEND #<pack>`` message is sent instead.
        max_line_length: Bytes of unterminated input tolerated from the server.
        read_chunk_size: Bytes requested per read from the connection.
        rejection_patterns: Case-insensitive regexes marking a bot's refusal.
    """

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=XDCC_REQUEST_TIMEOUT, gt=0)
    connect_timeout: float = Field(default=XDCC_CONNECT_TIMEOUT, gt=0)
    nick_retry_limit: int = Field(default=XDCC_NICK_RETRY_LIMIT, ge=0, le=50)
    nickname_prefix: str | None = None
    nickname_max_length: int = Field(
        default=XDCC_NICKNAME_MAX_LENGTH, ge=MIN_NICKNAME_LENGTH, le=30
    )
    username: str | None = None
    realname: str = XDCC_REALNAME
    tls: bool = False
    ctcp_request: bool = True
    max_line_length: int = Field(default=IRC_MAX_LINE_LENGTH, ge=512)
    read_chunk_size: int = Field(default=IRC_READ_CHUNK_SIZE, ge=1)
    rejection_patterns: tuple[str, ...] = DEFAULT_REJECTION_PATTERNS

    @field_validator("nickname_prefix")
    @classmethod
    def validate_nickname_prefix(cls, v: str | None) -> str | None:
        if v is None:
            return None
        cleaned = sanitize_stem(v.strip())
        if not cleaned:
            raise ValueError("nickname_prefix has no characters usable in a nickname")
        return cleaned[: 30 - SUFFIX_DIGITS]

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v or any(ch.isspace() or ch in "@:" for ch in v):
            raise ValueError("username must be a single token without '@' or ':'")
        return v

    @field_validator("realname")
    @classmethod
    def validate_realname(cls, v: str) -> str:
        if any(ch in v for ch in "\r\n\0"):
            raise ValueError("realname cannot contain line breaks")
        return v.strip() or XDCC_REALNAME

    @field_validator("rejection_patterns", mode="before")
    @classmethod
    def validate_rejection_patterns(cls, v: Any) -> tuple[str, ...]:
        if isinstance(v, str):
            v = (v,)
        patterns = tuple(v)
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid rejection pattern {pattern!r}: {e}") from e
        return patterns

    @property
    def default_port(self) -> int:
        return IRC_DEFAULT_TLS_PORT if self.tls else IRC_DEFAULT_PORT

    def compile_rejections(self) -> list[re.Pattern[str]]:
        return [re.compile(p, re.IGNORECASE) for p in self.rejection_patterns]


class RequestInfo(BaseModel):
    """Information needed to perform one XDCC request.

    Attributes:
        server: IRC server as ``host``, ``host:port`` or ``[v6]:port``.
        channel: Channel to join; ``#`` is prepended when no prefix is given.
        botname: Nickname of the bot to ask.
        packnum: Pack number, positive (``"#12"`` is accepted).
    """

    model_config = ConfigDict(frozen=True)

    server: str
    channel: str
    botname: str
    packnum: int = Field(gt=0)

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        v = v.strip()
        split_server_address(v, IRC_DEFAULT_PORT)
        return v

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        v = v.strip()
        if not v.lstrip(CHANNEL_PREFIXES):
            raise ValueError("channel name is empty")
        if any(ch in v for ch in " ,\x07\r\n\0"):
            raise ValueError(f"invalid character in channel name {v!r}")
        if v[0] not in CHANNEL_PREFIXES:
            v = f"#{v}"
        return v

    @field_validator("botname")
    @classmethod
    def validate_botname(cls, v: str) -> str:
        v = v.strip()
        if not v or any(ch.isspace() or ch in ",:!@\0" for ch in v):
            raise ValueError(f"invalid bot nickname {v!r}")
        return v

    @field_validator("packnum", mode="before")
    @classmethod
    def validate_packnum(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lstrip("#")
        return v

    def address(self, default_port: int = IRC_DEFAULT_PORT) -> tuple[str, int]:
        return split_server_address(self.server, default_port)
