"""Negotiate XDCC pack downloads over IRC.

Connects to an IRC server, joins a channel, asks a bot for a pack and returns
the DCC SEND endpoint the bot offers. Moving the file itself is left to the
caller.
"""

from .config import EngineConfig, RequestInfo  # noqa: F401
from .dcc import DccOffer, parse_dcc_send  # noqa: F401
from .engine import Engine, Request  # noqa: F401
from .errors import (  # noqa: F401
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
from .nickname import NicknameGenerator  # noqa: F401
from .session import Session, SessionState  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "BotRejectedError",
    "DccOffer",
    "DccParseError",
    "Engine",
    "EngineConfig",
    "FormatError",
    "IrcConnectionError",
    "JoinError",
    "NicknameGenerator",
    "ParseReason",
    "ProtocolOverflowError",
    "RegistrationError",
    "Request",
    "RequestError",
    "RequestInfo",
    "RequestTimeoutError",
    "Session",
    "SessionState",
    "parse_dcc_send",
]
