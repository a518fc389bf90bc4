"""Byte-stream connections consumed by the session."""

from __future__ import annotations

import asyncio
import ssl
from collections.abc import Awaitable, Callable

StreamPair = tuple[asyncio.StreamReader, asyncio.StreamWriter]
Connector = Callable[[str, int], Awaitable[StreamPair]]


class StreamConnector:
    """Opens plain TCP or TLS connections with ``asyncio.open_connection``."""

    def __init__(self, tls: bool = False, ssl_context: ssl.SSLContext | None = None):
        self.tls = tls
        self.ssl_context = ssl_context

    def _ssl(self) -> ssl.SSLContext | None:
        if not self.tls:
            return None
        return self.ssl_context or ssl.create_default_context()

    async def __call__(self, host: str, port: int) -> StreamPair:
        return await asyncio.open_connection(host, port, ssl=self._ssl())
