"""IRC message parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass, field

CTCP_DELIMITER = "\x01"


@dataclass(slots=True)
class IRCMessage:
    raw: str
    prefix: str | None
    command: str | None
    params: list[str] = field(default_factory=list)
    trailing: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def args(self) -> list[str]:
        """Middle parameters followed by the trailing one, if any."""
        if self.trailing is None:
            return list(self.params)
        return [*self.params, self.trailing]

    @property
    def source_nick(self) -> str | None:
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0].split("@", 1)[0]

    @property
    def is_numeric(self) -> bool:
        return bool(self.command) and len(self.command) == 3 and self.command.isdigit()


def parse_irc_message(raw_line: str) -> IRCMessage:
    """Split one line (without terminator) into tags, prefix, command and params.

    A line without a command token comes back with ``command=None``; the caller
    decides whether that is worth reporting.
    """
    tags: dict[str, str] = {}
    prefix: str | None = None
    trailing: str | None = None
    params: list[str] = []
    command: str | None = None

    original = raw_line
    rest = raw_line.lstrip(" ")

    if rest.startswith("@"):
        tags_part, _, rest = rest.partition(" ")
        tags = _parse_tags(tags_part[1:])
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        # Nothing but a trailing parameter: there is no command token.
        return IRCMessage(raw=original, prefix=prefix, command=None, tags=tags)

    if " :" in rest:
        rest, trailing = rest.split(" :", 1)

    parts = rest.split()
    if parts:
        command = parts[0].upper()
        params = parts[1:]

    return IRCMessage(
        raw=original,
        prefix=prefix,
        command=command,
        params=params,
        trailing=trailing,
        tags=tags,
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def extract_ctcp(text: str) -> str | None:
    """Return the CTCP payload of ``text`` or None for ordinary text.

    The closing delimiter is optional because some clients drop it.
    """
    if not text.startswith(CTCP_DELIMITER):
        return None
    payload = text[1:]
    if payload.endswith(CTCP_DELIMITER):
        payload = payload[:-1]
    return payload


@dataclass(slots=True)
class UserMessage:
    sender: str
    target: str
    kind: str  # PRIVMSG or NOTICE
    text: str
    ctcp: str | None
    tags: dict[str, str]


def build_user_message(parsed: IRCMessage) -> UserMessage | None:
    """Turn a PRIVMSG/NOTICE sent by a user into a :class:`UserMessage`.

    Server notices (no nick in the prefix) and lines missing target or text
    yield None.
    """
    if parsed.command not in ("PRIVMSG", "NOTICE"):
        return None
    args = parsed.args
    if len(args) < 2:
        return None
    sender = parsed.source_nick
    if not sender:
        return None
    if "!" not in (parsed.prefix or "") and "." in sender:
        return None  # server name, nicknames cannot contain dots
    target, text = args[0], args[-1]
    return UserMessage(
        sender=sender,
        target=target,
        kind=parsed.command,
        text=text,
        ctcp=extract_ctcp(text),
        tags=parsed.tags,
    )
