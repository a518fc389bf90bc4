"""IRC nickname/channel case folding (RFC 1459 casemapping).

IRC treats ``[]\\~`` as the upper-case forms of ``{}|^``; ``str.lower`` knows
nothing about that, so comparisons of nicknames go through :func:`irc_lower`.
"""

from __future__ import annotations

import string

_RFC1459_UPPER = string.ascii_uppercase + "[]\\~"
_RFC1459_LOWER = string.ascii_lowercase + "{}|^"
_TRANSLATION = str.maketrans(_RFC1459_UPPER, _RFC1459_LOWER)


def irc_lower(value: str) -> str:
    """Return ``value`` folded with the RFC 1459 casemapping."""
    return value.translate(_TRANSLATION)


def irc_equals(first: str | None, second: str | None) -> bool:
    if first is None or second is None:
        return False
    return irc_lower(first) == irc_lower(second)
