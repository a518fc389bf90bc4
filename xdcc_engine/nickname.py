"""Random IRC nicknames so concurrent requests do not collide on shared networks."""

from __future__ import annotations

import itertools
import logging
import re
import secrets
import string
import time
from collections.abc import Callable

from .constants import XDCC_NICKNAME_MAX_LENGTH
from .logs.logger import logger

EntropySource = Callable[[int], bytes]

MIN_NICKNAME_LENGTH = 9  # RFC 1459 guarantees at least this much
SUFFIX_DIGITS = 4
_SPECIAL = "[]\\`_^{|}"
_NICK_RE = re.compile(r"^[A-Za-z\[\]\\`_^{|}][A-Za-z0-9\[\]\\`_^{|}-]*$")
_ALLOWED = set(string.ascii_letters + string.digits + _SPECIAL + "-")

ADJECTIVES = (
    "amber", "brisk", "calm", "dusty", "eager", "fuzzy", "gentle", "hazy",
    "icy", "jolly", "keen", "lucky", "misty", "noble", "odd", "proud",
    "quiet", "rusty", "shy", "tidy", "vivid", "witty", "young", "zesty",
)
NOUNS = (
    "badger", "crow", "dingo", "eel", "falcon", "gecko", "heron", "ibis",
    "jackal", "koala", "lynx", "mole", "newt", "otter", "panda", "quail",
    "raven", "seal", "tapir", "urchin", "vole", "wren", "yak", "zebra",
)


def is_valid_nickname(nickname: str, max_length: int = XDCC_NICKNAME_MAX_LENGTH) -> bool:
    return 0 < len(nickname) <= max_length and bool(_NICK_RE.match(nickname))


def sanitize_stem(stem: str) -> str:
    """Drop characters IRC does not allow and any leading digits or dashes."""
    cleaned = "".join(ch for ch in stem if ch in _ALLOWED)
    return cleaned.lstrip(string.digits + "-")


class NicknameGenerator:
    """Produces ``<stem><digits>`` nicknames from an entropy source.

    The stem is either the configured prefix or an adjective/noun pair. If
    the entropy source raises, a process-local counter combined with the
    generator's creation time stands in for it, so a nickname is always
    produced.
    """

    def __init__(
        self,
        entropy: EntropySource = secrets.token_bytes,
        *,
        prefix: str | None = None,
        max_length: int = XDCC_NICKNAME_MAX_LENGTH,
    ) -> None:
        if max_length < MIN_NICKNAME_LENGTH:
            raise ValueError(f"max_length must be at least {MIN_NICKNAME_LENGTH}")
        self.entropy = entropy
        self.prefix = sanitize_stem(prefix) if prefix else None
        self.max_length = max_length
        self._counter = itertools.count(1)
        self._started = int(time.time())

    def _random_value(self) -> int:
        try:
            data = self.entropy(8)
            if len(data) < 8:
                raise ValueError(f"entropy source returned {len(data)} bytes")
            return int.from_bytes(data[:8], "big")
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "nickname",
                "entropy_unavailable",
                level=logging.WARNING,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._started * 1_000_003 + next(self._counter)

    def next_nickname(self) -> str:
        value = self._random_value()
        suffix = str(value % 10**SUFFIX_DIGITS).zfill(SUFFIX_DIGITS)
        value //= 10**SUFFIX_DIGITS
        if self.prefix:
            stem = self.prefix
        else:
            adjective = ADJECTIVES[value % len(ADJECTIVES)]
            noun = NOUNS[(value // len(ADJECTIVES)) % len(NOUNS)]
            stem = f"{adjective}{noun}"
        stem = stem[: self.max_length - SUFFIX_DIGITS] or "x"
        return f"{stem}{suffix}"

    __call__ = next_nickname
