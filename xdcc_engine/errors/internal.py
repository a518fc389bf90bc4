"""Centralized error hierarchy for XDCC requests.

Every terminal outcome of a request other than a successful offer is one of
these exceptions. The concrete class is the tag of the outcome; ``kind``
carries the same tag as a plain string for logging and serialization.

Classes:
  RequestError           – Base for all terminal request errors.
  IrcConnectionError     – Transport failures (unreachable, refused, EOF).
  RegistrationError      – Nickname collisions exhausted or registration refused.
  JoinError              – Explicit rejection of the channel join.
  BotRejectedError       – The bot (or the server on its behalf) denied the request.
  DccParseError          – A DCC SEND payload that is not a usable offer.
  ProtocolOverflowError  – Peer exceeded the line buffer bound (desync).
  RequestTimeoutError    – Deadline passed before a terminal state.

``FormatError`` is separate: it reports a caller bug while encoding an
outgoing line and is never a request outcome.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class RequestError(Exception):
    """Base class for all terminal request errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    kind = "request_error"
    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class IrcConnectionError(RequestError):
    """The byte-stream connection could not be opened or was lost."""

    kind = "connection_error"


class RegistrationError(RequestError):
    """The server did not accept any nickname within the retry limit."""

    kind = "registration_error"


class JoinError(RequestError):
    """The server explicitly refused the channel join."""

    kind = "join_error"


class BotRejectedError(RequestError):
    """The target bot refused the pack request or is not reachable."""

    kind = "bot_rejected"


class ParseReason(Enum):
    NOT_DCC_SEND = "not a DCC SEND payload"
    MISSING_FIELD = "missing field"
    INVALID_ADDRESS = "non-numeric or invalid address"
    ADDRESS_OUT_OF_RANGE = "address out of range"
    INVALID_PORT = "non-numeric port"
    PORT_OUT_OF_RANGE = "port out of range"
    INVALID_SIZE = "non-numeric filesize"
    SIZE_OUT_OF_RANGE = "filesize out of range"
    UNTERMINATED_QUOTE = "unterminated quoted filename"


class DccParseError(RequestError):
    """A DCC SEND payload could not be turned into an offer.

    Attributes:
        reason: The :class:`ParseReason` describing what was wrong.
        payload: The CTCP payload that failed to parse.
    """

    kind = "parse_error"

    def __init__(
        self,
        reason: ParseReason,
        payload: str,
        *,
        detail: str | None = None,
        data: Mapping[str, object] | None = None,
    ) -> None:
        message = reason.value if not detail else f"{reason.value}: {detail}"
        super().__init__(message, data=data)
        self.reason = reason
        self.payload = payload


class ProtocolOverflowError(RequestError):
    """The peer sent more bytes than allowed without a line terminator."""

    kind = "protocol_overflow"


class RequestTimeoutError(RequestError):
    """The overall deadline elapsed before the session reached a result."""

    kind = "timed_out"


class FormatError(ValueError):
    """An outgoing IRC line could not be formatted from its parameters."""
