from __future__ import annotations

import logging

from ..logging_config import log_structured_error
from .internal import (
    BotRejectedError,
    DccParseError,
    IrcConnectionError,
    JoinError,
    ProtocolOverflowError,
    RegistrationError,
    RequestError,
    RequestTimeoutError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception onto the category used by structured error logs."""
    if isinstance(error, IrcConnectionError | OSError):
        return "network"
    if isinstance(error, ProtocolOverflowError | DccParseError):
        return "protocol"
    if isinstance(error, RegistrationError | JoinError):
        return "irc"
    if isinstance(error, BotRejectedError):
        return "bot"
    if isinstance(error, RequestTimeoutError):
        return "timeout"
    if isinstance(error, RequestError):
        return "request"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, object] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Structured data attached to a :class:`RequestError` is merged into the
    logged context, caller supplied keys taking precedence.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level for the record.
    """
    merged: dict[str, object] = {}
    if isinstance(error, RequestError):
        merged.update(error.data)
    if context:
        merged.update(context)

    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error if isinstance(error, Exception) else None,
        context=merged,
        level=level,
    )
