"""Tests for xdcc_engine/engine.py."""

import asyncio
import itertools
import logging

import pytest
from pydantic import ValidationError

from tests.fixtures.irc_server import XdccNetwork, dcc_send_from
from xdcc_engine import (
    DccOffer,
    Engine,
    EngineConfig,
    NicknameGenerator,
    RegistrationError,
    RequestTimeoutError,
    SessionState,
)
from xdcc_engine.transport import StreamConnector

OFFER = 'DCC SEND "My File.bin" 3232235777 51413 104857600'


def deterministic_nicknames() -> NicknameGenerator:
    counter = itertools.count(1)
    return NicknameGenerator(lambda size: next(counter).to_bytes(size, "big"))


def make_engine(connector, **config) -> Engine:
    return Engine(
        EngineConfig(**config), connector=connector, nicknames=deterministic_nicknames()
    )


@pytest.mark.asyncio
async def test_execute_returns_offer_and_closes_connection():
    server = XdccNetwork(bot_reply=dcc_send_from("XdccBot", OFFER))
    engine = make_engine(server.connect)

    offer = await engine.execute("irc.test:7000", "xdcc", "XdccBot", 7, timeout=2)

    assert isinstance(offer, DccOffer)
    assert offer.filename == "My File.bin"
    assert server.connections == [("irc.test", 7000)]
    assert server.closed


@pytest.mark.asyncio
async def test_create_request_then_execute():
    server = XdccNetwork(bot_reply=dcc_send_from("XdccBot", OFFER))
    engine = make_engine(server.connect)
    request = engine.create_request("irc.test", "#xdcc", "XdccBot", "#3")

    offer = await request.execute(timeout=2)

    assert request.info.packnum == 3
    assert request.session is not None
    assert request.session.state is SessionState.COMPLETED
    assert offer.port == 51413


@pytest.mark.asyncio
async def test_request_executes_only_once():
    server = XdccNetwork(bot_reply=dcc_send_from("XdccBot", OFFER))
    request = make_engine(server.connect).create_request("irc.test", "#x", "XdccBot", 1)
    await request.execute(timeout=2)
    with pytest.raises(RuntimeError):
        await request.execute(timeout=2)


def test_invalid_request_fails_before_any_connection():
    engine = Engine()
    with pytest.raises(ValidationError):
        engine.create_request("irc.test", "#xdcc", "XdccBot", 0)


@pytest.mark.asyncio
async def test_engine_timeout_is_used_by_default():
    server = XdccNetwork()
    engine = make_engine(server.connect, timeout=0.2)

    with pytest.raises(RequestTimeoutError):
        await engine.execute("irc.test", "#xdcc", "XdccBot", 7)
    assert server.closed


@pytest.mark.asyncio
async def test_failure_is_logged_as_structured_error(caplog):
    server = XdccNetwork(collisions=5)
    engine = make_engine(server.connect, nick_retry_limit=0)

    with caplog.at_level(logging.ERROR, logger="xdcc_engine"):
        with pytest.raises(RegistrationError):
            await engine.execute("irc.test", "#xdcc", "XdccBot", 7, timeout=2)

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("[IRC] XDCC request failed") for m in messages)
    assert any("packnum=7" in m for m in messages)


@pytest.mark.asyncio
async def test_concurrent_requests_use_separate_connections():
    servers = [XdccNetwork(bot_reply=dcc_send_from("XdccBot", OFFER)) for _ in range(3)]
    pool = iter(servers)

    async def connector(host, port):
        return await next(pool).connect(host, port)

    engine = make_engine(connector)
    offers = await asyncio.gather(
        *(engine.execute("irc.test", "#xdcc", "XdccBot", n, timeout=2) for n in (1, 2, 3))
    )

    assert len(offers) == 3
    assert all(s.closed for s in servers)
    nicks = {s.nick for s in servers}
    assert len(nicks) == 3
    requested = sorted(s.requests[0] for s in servers)
    assert requested == [f"\x01XDCC SEND {n}\x01" for n in (1, 2, 3)]


def test_default_engine_wiring():
    engine = Engine(EngineConfig(tls=True, nickname_prefix="leech", nickname_max_length=12))
    assert isinstance(engine.connector, StreamConnector)
    assert engine.connector.tls is True
    nick = engine.nicknames()
    assert nick.startswith("leech")
    assert len(nick) <= 12


def test_stream_connector_ssl_context():
    assert StreamConnector()._ssl() is None
    assert StreamConnector(tls=True)._ssl() is not None
