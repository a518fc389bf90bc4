"""Protocol state machine driving one connection from connect to DCC offer."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable
from enum import Enum, auto

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from .config import EngineConfig, RequestInfo
from .constants import IRC_QUIT_MESSAGE
from .dcc import DccOffer, is_dcc_send, parse_dcc_send
from .errors import (
    BotRejectedError,
    DccParseError,
    IrcConnectionError,
    JoinError,
    ProtocolOverflowError,
    RegistrationError,
    RequestError,
    RequestTimeoutError,
)
from .irc import (
    IRCMessage,
    LineDecoder,
    MalformedLine,
    build_user_message,
    ctcp_quote,
    encode_line,
    irc_equals,
)
from .irc import numerics
from .logs.logger import logger
from .transport import Connector

CLOSE_TIMEOUT = 2.0


class SessionState(Enum):
    CONNECTING = auto()
    REGISTERING = auto()
    JOINING = auto()
    REQUESTING = auto()
    AWAITING_OFFER = auto()
    COMPLETED = auto()
    FAILED = auto()
    TIMED_OUT = auto()
    CANCELLED = auto()


TERMINAL_STATES = frozenset(
    {
        SessionState.COMPLETED,
        SessionState.FAILED,
        SessionState.TIMED_OUT,
        SessionState.CANCELLED,
    }
)


class NicknameRejected(Exception):
    """The server refused the nickname just sent; a fresh one may work."""

    def __init__(self, nickname: str, numeric: str, reason: str | None) -> None:
        super().__init__(f"{nickname} rejected with {numeric}: {reason or ''}".rstrip())
        self.nickname = nickname
        self.numeric = numeric
        self.reason = reason


class Session:
    """One execution of a request over its own connection.

    The session reads the connection in a single loop; every read is bounded
    by what is left of one deadline fixed when :meth:`run` starts, so no
    phase can extend the total wait. The connection is closed on every exit
    path, including cancellation.
    """

    def __init__(
        self,
        info: RequestInfo,
        config: EngineConfig,
        nicknames: Callable[[], str],
        connector: Connector,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.info = info
        self.config = config
        self.nicknames = nicknames
        self.connector = connector
        self.clock = clock
        self.state = SessionState.CONNECTING
        self.nickname: str | None = None
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.decoder = LineDecoder(config.max_line_length)
        self.deadline = 0.0
        self.timeout = config.timeout
        self.offer: DccOffer | None = None
        self.error: RequestError | None = None
        self.closed = False
        self._pending: deque[IRCMessage] = deque()
        self._last_parse_error: DccParseError | None = None
        self._timed_out = False
        self._rejections = config.compile_rejections()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def run(self, timeout: float | None = None) -> DccOffer:
        if self.state is not SessionState.CONNECTING or self.closed:
            raise RuntimeError("a session can only run once")
        self.timeout = timeout if timeout is not None else self.config.timeout
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        self.deadline = self.clock() + self.timeout
        try:
            await self._connect()
            await self._register()
            await self._join()
            await self._send_request()
            offer = await self._await_offer()
        except RequestError as e:
            self.error = e
            self._set_state(
                SessionState.TIMED_OUT if self._timed_out else SessionState.FAILED
            )
            raise
        except asyncio.CancelledError:
            self._set_state(SessionState.CANCELLED)
            raise
        finally:
            await self.close()
        self.offer = offer
        self._set_state(SessionState.COMPLETED)
        return offer

    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "session",
                "state_change",
                level=logging.DEBUG,
                nickname=self.nickname,
                channel=self.info.channel,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def remaining(self) -> float:
        return self.deadline - self.clock()

    def _timeout_error(self) -> RequestError:
        self._timed_out = True
        if self.state is SessionState.AWAITING_OFFER and self._last_parse_error:
            return self._last_parse_error
        return RequestTimeoutError(
            f"no result within {self.timeout}s (stuck in {self.state.name})",
            data={"phase": self.state.name, "timeout": self.timeout},
        )

    async def close(self) -> None:
        """Close the connection without waiting past the deadline.

        Once the deadline has passed, or the run was timed out or cancelled,
        the transport is aborted. Otherwise QUIT is sent and the graceful
        close is awaited for at most what is left of the deadline.
        """
        writer = self.writer
        self.writer = None
        self.reader = None
        self.closed = True
        if writer is None:
            return
        remaining = self.remaining()
        if remaining <= 0 or self.state in (SessionState.TIMED_OUT, SessionState.CANCELLED):
            writer.transport.abort()
        else:
            try:
                if not writer.is_closing():
                    writer.write(encode_line("QUIT", IRC_QUIT_MESSAGE))
                writer.close()
                await asyncio.wait_for(
                    writer.wait_closed(), timeout=min(CLOSE_TIMEOUT, remaining)
                )
            except (OSError, TimeoutError) as e:
                logger.log_event(
                    "irc",
                    "close_error",
                    level=logging.WARNING,
                    nickname=self.nickname,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                writer.transport.abort()
        logger.log_event(
            "irc", "disconnected", level=logging.DEBUG, nickname=self.nickname
        )

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------
    async def _connect(self) -> None:
        host, port = self.info.address(self.config.default_port)
        logger.log_event("irc", "connect_start", level=logging.DEBUG, host=host, port=port)
        remaining = self.remaining()
        limit = min(self.config.connect_timeout, remaining)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                self.connector(host, port), timeout=limit
            )
        except TimeoutError:
            if limit == remaining:
                raise self._timeout_error() from None
            raise IrcConnectionError(
                f"connecting to {host}:{port} timed out after {limit:.1f}s",
                data={"host": host, "port": port},
            ) from None
        except OSError as e:
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                host=host,
                port=port,
                error=str(e),
            )
            raise IrcConnectionError(
                f"could not connect to {host}:{port}: {e}",
                data={"host": host, "port": port},
            ) from e
        logger.log_event(
            "irc", "connection_established", level=logging.DEBUG, host=host, port=port
        )

    async def _send(self, command: str, *params: str) -> None:
        if self.writer is None:
            raise IrcConnectionError("connection is not open")
        data = encode_line(command, *params)
        logger.log_event(
            "irc",
            "send",
            level=logging.DEBUG,
            nickname=self.nickname,
            line=data.decode("utf-8").rstrip(),
        )
        remaining = self.remaining()
        if remaining <= 0:
            raise self._timeout_error()
        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=remaining)
        except TimeoutError:
            raise self._timeout_error() from None
        except OSError as e:
            raise IrcConnectionError(f"write failed: {e}") from e

    async def _read_more(self) -> None:
        remaining = self.remaining()
        if remaining <= 0 or self.reader is None:
            raise self._timeout_error()
        try:
            data = await asyncio.wait_for(
                self.reader.read(self.config.read_chunk_size), timeout=remaining
            )
        except TimeoutError:
            raise self._timeout_error() from None
        except OSError as e:
            raise IrcConnectionError(f"read failed: {e}") from e
        if not data:
            raise IrcConnectionError("connection closed by server")
        try:
            events = self.decoder.feed(data)
        except ProtocolOverflowError:
            logger.log_event(
                "irc",
                "buffer_overflow",
                level=logging.ERROR,
                nickname=self.nickname,
                limit=self.decoder.max_line_length,
            )
            raise
        for event in events:
            if isinstance(event, MalformedLine):
                logger.log_event(
                    "irc",
                    "malformed_line",
                    level=logging.DEBUG,
                    nickname=self.nickname,
                    reason=event.reason,
                    raw=event.raw,
                )
                continue
            self._pending.append(event)

    async def _next_message(self) -> IRCMessage:
        """Return the next line the current phase has to look at.

        PING and ERROR are dealt with here for every phase.
        """
        while True:
            while not self._pending:
                await self._read_more()
            message = self._pending.popleft()
            if message.command == "PING":
                token = message.args[0] if message.args else ""
                logger.log_event(
                    "irc", "ping", level=logging.DEBUG, nickname=self.nickname, token=token
                )
                await self._send("PONG", token)
                continue
            logger.log_event(
                "irc", "raw", level=logging.DEBUG, nickname=self.nickname, line=message.raw
            )
            if message.command == "ERROR":
                reason = message.args[0] if message.args else "unknown"
                logger.log_event(
                    "irc",
                    "server_error",
                    level=logging.ERROR,
                    nickname=self.nickname,
                    reason=reason,
                )
                raise IrcConnectionError(
                    f"server closed the link: {reason}", data={"reason": reason}
                )
            return message

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    async def _register(self) -> None:
        self._set_state(SessionState.REGISTERING)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.nick_retry_limit + 1),
            retry=retry_if_exception_type(NicknameRejected),
            before_sleep=self._log_collision,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self._attempt_registration(
                        send_user=attempt.retry_state.attempt_number == 1
                    )
        except NicknameRejected as e:
            logger.log_event(
                "session",
                "registration_failed",
                level=logging.ERROR,
                nickname=self.nickname,
                reason=str(e),
            )
            raise RegistrationError(
                f"nickname rejected {self.config.nick_retry_limit + 1} times",
                data={"numeric": e.numeric, "nickname": e.nickname},
            ) from e

    def _log_collision(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "session",
            "nickname_collision",
            level=logging.WARNING,
            nickname=getattr(error, "nickname", self.nickname),
            numeric=getattr(error, "numeric", "?"),
            attempt=retry_state.attempt_number,
        )

    async def _attempt_registration(self, send_user: bool) -> None:
        nickname = self.nicknames()
        self.nickname = nickname
        if not send_user:
            logger.log_event(
                "session", "nickname_changed", level=logging.DEBUG, nickname=nickname
            )
        await self._send("NICK", nickname)
        if send_user:
            await self._send(
                "USER", self.config.username or nickname, "0", "*", self.config.realname
            )
        while True:
            message = await self._next_message()
            if message.command == numerics.RPL_WELCOME:
                # The server may have truncated the nickname; 001 names it.
                if message.params:
                    self.nickname = message.params[0]
                logger.log_event("session", "registered", nickname=self.nickname)
                return
            if message.command in numerics.NICKNAME_REJECTIONS:
                raise NicknameRejected(nickname, message.command, message.trailing)
            if message.command in numerics.REGISTRATION_FAILURES:
                reason = message.trailing or message.command
                logger.log_event(
                    "session",
                    "registration_failed",
                    level=logging.ERROR,
                    nickname=nickname,
                    reason=reason,
                )
                raise RegistrationError(
                    f"server refused registration: {reason}",
                    data={"numeric": message.command, "nickname": nickname},
                )

    async def _join(self) -> None:
        self._set_state(SessionState.JOINING)
        channel = self.info.channel
        await self._send("JOIN", channel)
        while True:
            message = await self._next_message()
            if self._confirms_join(message, channel):
                logger.log_event(
                    "session", "join_confirmed", nickname=self.nickname, channel=channel
                )
                return
            if message.command in numerics.JOIN_REJECTIONS and self._concerns_channel(
                message, channel
            ):
                reason = message.trailing or message.command
                logger.log_event(
                    "session",
                    "join_rejected",
                    level=logging.ERROR,
                    nickname=self.nickname,
                    channel=channel,
                    numeric=message.command,
                    reason=reason,
                )
                raise JoinError(
                    f"cannot join {channel}: {reason}",
                    data={"numeric": message.command, "channel": channel},
                )

    def _confirms_join(self, message: IRCMessage, channel: str) -> bool:
        if message.command == "JOIN":
            return (
                irc_equals(message.source_nick, self.nickname)
                and bool(message.args)
                and irc_equals(message.args[0], channel)
            )
        if message.command in (numerics.RPL_NAMREPLY, numerics.RPL_ENDOFNAMES):
            return any(irc_equals(p, channel) for p in message.params[1:])
        return False

    @staticmethod
    def _concerns_channel(message: IRCMessage, channel: str) -> bool:
        # ERR_xxx <me> <channel> :reason; tolerate servers that omit the channel
        if len(message.params) < 2:
            return True
        return irc_equals(message.params[1], channel)

    async def _send_request(self) -> None:
        self._set_state(SessionState.REQUESTING)
        packnum = self.info.packnum
        if self.config.ctcp_request:
            text = ctcp_quote(f"XDCC SEND {packnum}")
        else:
            text = f"XDCC SEND #{packnum}"
        await self._send("PRIVMSG", self.info.botname, text)
        logger.log_event(
            "session",
            "request_sent",
            nickname=self.nickname,
            channel=self.info.channel,
            bot=self.info.botname,
            packnum=packnum,
        )
        self._set_state(SessionState.AWAITING_OFFER)

    async def _await_offer(self) -> DccOffer:
        bot = self.info.botname
        while True:
            message = await self._next_message()
            if (
                message.command == numerics.ERR_NOSUCHNICK
                and len(message.params) >= 2
                and irc_equals(message.params[1], bot)
            ):
                self._bot_rejected(f"{bot} is not online", message.command)
            user_message = build_user_message(message)
            if user_message is None:
                continue
            from_bot = irc_equals(user_message.sender, bot)
            if user_message.ctcp is not None:
                offer = self._consider_ctcp(user_message.ctcp, user_message.sender, from_bot)
                if offer is not None:
                    return offer
                continue
            if from_bot and irc_equals(user_message.target, self.nickname):
                logger.log_event(
                    "session",
                    "bot_notice",
                    level=logging.DEBUG,
                    nickname=self.nickname,
                    bot=bot,
                    text=user_message.text,
                )
                if any(p.search(user_message.text) for p in self._rejections):
                    self._bot_rejected(user_message.text, user_message.kind)

    def _consider_ctcp(self, payload: str, sender: str, from_bot: bool) -> DccOffer | None:
        if not from_bot or not is_dcc_send(payload):
            logger.log_event(
                "session",
                "foreign_ctcp",
                level=logging.DEBUG,
                nickname=self.nickname,
                ctcp=payload.split(" ", 1)[0],
                sender=sender,
            )
            return None
        try:
            offer = parse_dcc_send(payload)
        except DccParseError as e:
            self._last_parse_error = e
            logger.log_event(
                "session",
                "offer_malformed",
                level=logging.WARNING,
                nickname=self.nickname,
                bot=sender,
                reason=str(e),
                payload=payload,
            )
            return None
        logger.log_event(
            "session",
            "offer_received",
            nickname=self.nickname,
            bot=sender,
            filename=offer.filename,
        )
        return offer

    def _bot_rejected(self, reason: str, source: str) -> None:
        logger.log_event(
            "session",
            "bot_rejected",
            level=logging.ERROR,
            nickname=self.nickname,
            bot=self.info.botname,
            reason=reason,
        )
        raise BotRejectedError(
            f"{self.info.botname} refused pack #{self.info.packnum}: {reason}",
            data={"bot": self.info.botname, "packnum": self.info.packnum, "source": source},
        )
