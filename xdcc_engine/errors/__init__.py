"""Error taxonomy and error-logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    BotRejectedError,
    DccParseError,
    FormatError,
    IrcConnectionError,
    JoinError,
    ParseReason,
    ProtocolOverflowError,
    RegistrationError,
    RequestError,
    RequestTimeoutError,
)

__all__ = [
    "BotRejectedError",
    "DccParseError",
    "FormatError",
    "IrcConnectionError",
    "JoinError",
    "ParseReason",
    "ProtocolOverflowError",
    "RegistrationError",
    "RequestError",
    "RequestTimeoutError",
    "classify_error",
    "log_error",
]
