"""Public entry point: create and execute XDCC pack requests."""

from __future__ import annotations

import asyncio
import logging

from .config import EngineConfig, RequestInfo
from .dcc import DccOffer
from .errors import RequestError, RequestTimeoutError, log_error
from .logs.logger import logger
from .nickname import NicknameGenerator
from .session import Session
from .transport import Connector, StreamConnector


class Engine:
    """Creates and runs XDCC requests sharing one configuration.

    Requests created from the same engine share only the nickname generator
    and the connector; each one runs its own session over its own
    connection, so they can be awaited concurrently.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        connector: Connector | None = None,
        nicknames: NicknameGenerator | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.connector = connector or StreamConnector(tls=self.config.tls)
        self.nicknames = nicknames or NicknameGenerator(
            prefix=self.config.nickname_prefix,
            max_length=self.config.nickname_max_length,
        )

    def create_request(
        self, server: str, channel: str, botname: str, packnum: int | str
    ) -> Request:
        """Create a new XDCC :class:`Request`.

        Args:
            server: IRC server address, ``host[:port]``.
            channel: IRC channel to join.
            botname: Bot's nickname to send the XDCC request to.
            packnum: XDCC pack number.

        Raises:
            pydantic.ValidationError: If any argument is invalid.
        """
        info = RequestInfo(server=server, channel=channel, botname=botname, packnum=packnum)
        return Request(self, info)

    def new_session(self, info: RequestInfo) -> Session:
        return Session(info, self.config, self.nicknames.next_nickname, self.connector)

    async def execute(
        self,
        server: str,
        channel: str,
        bot_nickname: str,
        pack_number: int | str,
        timeout: float | None = None,
    ) -> DccOffer:
        """Create a request and execute it right away."""
        request = self.create_request(server, channel, bot_nickname, pack_number)
        return await request.execute(timeout)


class Request:
    """A single XDCC request created from an :class:`Engine`.

    A request executes at most once; create another one to retry.
    """

    def __init__(self, engine: Engine, info: RequestInfo) -> None:
        self.engine = engine
        self.info = info
        self.session: Session | None = None

    def __repr__(self) -> str:
        return f"Request({self.info!r})"

    async def execute(self, timeout: float | None = None) -> DccOffer:
        """Connect, register, join, ask the bot and wait for its DCC SEND offer.

        Args:
            timeout: Overall budget in seconds; defaults to the engine's.

        Returns:
            The :class:`DccOffer` sent by the bot.

        Raises:
            RequestError: One subclass per failure kind; the connection has
                been closed by the time it is raised.
        """
        if self.session is not None:
            raise RuntimeError("request has already been executed")
        session = self.session = self.engine.new_session(self.info)
        context = {
            "server": self.info.server,
            "channel": self.info.channel,
            "bot": self.info.botname,
            "packnum": self.info.packnum,
        }
        logger.log_event("engine", "request_start", **context)
        try:
            offer = await session.run(timeout)
        except RequestTimeoutError as e:
            logger.log_event(
                "engine",
                "request_timeout",
                level=logging.WARNING,
                nickname=session.nickname,
                timeout=session.timeout,
                **context,
            )
            log_error("XDCC request timed out", e, context=context, level=logging.WARNING)
            raise
        except RequestError as e:
            logger.log_event(
                "engine",
                "request_failed",
                level=logging.ERROR,
                nickname=session.nickname,
                error=str(e),
                error_kind=e.kind,
                **context,
            )
            log_error("XDCC request failed", e, context=context)
            raise
        except asyncio.CancelledError:
            logger.log_event(
                "engine",
                "request_cancelled",
                level=logging.WARNING,
                nickname=session.nickname,
                **context,
            )
            raise
        logger.log_event(
            "engine",
            "request_completed",
            nickname=session.nickname,
            filename=offer.filename,
            filesize=offer.filesize,
            address=str(offer.address),
            port=offer.port,
        )
        return offer
