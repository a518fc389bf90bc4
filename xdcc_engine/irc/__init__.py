"""IRC line codec package.

Contains message parsing, wire encoding, incremental decoding, RFC 1459 case
folding and the numeric replies the session reacts to.
"""

from .casemap import irc_equals, irc_lower  # noqa: F401
from .codec import (  # noqa: F401
    LineDecoder,
    MalformedLine,
    ctcp_quote,
    encode_line,
    format_line,
)
from .parser import (  # noqa: F401
    IRCMessage,
    UserMessage,
    build_user_message,
    extract_ctcp,
    parse_irc_message,
)

__all__ = [
    "IRCMessage",
    "LineDecoder",
    "MalformedLine",
    "UserMessage",
    "build_user_message",
    "ctcp_quote",
    "encode_line",
    "extract_ctcp",
    "format_line",
    "irc_equals",
    "irc_lower",
    "parse_irc_message",
]
