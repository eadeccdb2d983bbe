"""
Feed Session

Owns one WebSocket connection to one exchange:

- connect():   open the transport to the adapter's connection URL
- subscribe(): send the adapter-built subscription request, once
- receive():   pull the next inbound frame, decoded from JSON

There is no reconnection: any transport, send or framing failure is raised
to the caller and ends the run. After subscribe() the outbound half stays
idle; the sampling loop only pulls frames.

Usage:
    async with FeedSession(config, adapter, ["btc_usdt"]) as feed:
        await feed.connect()
        await feed.subscribe()
        frame = await feed.receive()
"""

import json
from typing import Any, List, Optional

import aiohttp

from core.errors import (
    FrameSendError,
    MalformedFrameError,
    TransportError,
    UnexpectedFrameError,
)
from core.exchange_interface import ExchangeAdapter
from core.logging import get_logger, log_websocket_event
from core.schemas import ExchangeConfig


CLOSE_TYPES = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


class FeedSession:
    """
    One exchange connection lifecycle.

    Attributes:
        config: Static exchange descriptor
        adapter: Wire codec for this exchange
        pairs: Requested `base_quote` tokens
        heartbeat: aiohttp ping interval in seconds (None = disabled)
        session: aiohttp ClientSession, created on context entry
        ws: Open WebSocket, set by connect()

    Notes:
        - connect() outside `async with` is a programming error (RuntimeError)
        - subscribe() before a successful connect() is a programming error
        - No timeout is applied to the handshake
    """

    def __init__(
        self,
        config: ExchangeConfig,
        adapter: ExchangeAdapter,
        pairs: List[str],
        heartbeat: Optional[float] = None
    ):
        self.config = config
        self.adapter = adapter
        self.pairs = list(pairs)
        self.heartbeat = heartbeat

        self.session: Optional[aiohttp.ClientSession] = None
        self.ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self.frames_received = 0

        self.logger = get_logger(__name__)

    @property
    def name(self) -> str:
        return self.adapter.name

    def __repr__(self) -> str:
        return f"FeedSession(name={self.name!r})"

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        self.logger.debug(f"HTTP session created for {self.name}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ============================================
    # Connection Lifecycle
    # ============================================

    async def connect(self) -> None:
        """
        Open the WebSocket.

        Raises:
            RuntimeError: If the HTTP session was not created
            TransportError: If the connection or handshake fails
        """
        if not self.session:
            raise RuntimeError("Client session not initialized. Use 'async with' statement.")

        url = self.adapter.connection_url(self.config.ws_base_url, self.pairs)
        self.logger.info(f"Connecting to {url}")

        try:
            self.ws = await self.session.ws_connect(url, heartbeat=self.heartbeat)
        except (aiohttp.ClientError, OSError) as e:
            log_websocket_event(self.name, "error", f"connect failed: {e}")
            raise TransportError(
                f"Failed to connect to {self.name} at {url}: {e}",
                exchange=self.name
            ) from e

        log_websocket_event(self.name, "connected", url)

    async def subscribe(self) -> None:
        """
        Send the subscription request as one text frame.

        Raises:
            RuntimeError: If the connection is not open
            FrameSendError: If the frame cannot be sent
        """
        if self.ws is None or self.ws.closed:
            raise RuntimeError(f"Cannot subscribe: {self.name} connection is not open")

        payload = self.adapter.build_subscription(self.config.req_param, self.pairs)
        message = json.dumps(payload)
        self.logger.debug(f"Subscribing to {self.name}: {message}")

        try:
            await self.ws.send_str(message)
        except (aiohttp.ClientError, OSError) as e:
            log_websocket_event(self.name, "error", f"subscribe failed: {e}")
            raise FrameSendError(
                f"Failed to send subscription to {self.name}: {e}",
                exchange=self.name
            ) from e

        log_websocket_event(self.name, "subscribed", f"{len(self.pairs)} pair(s)")

    async def receive(self) -> Any:
        """
        Pull the next frame.

        Returns:
            Any: Decoded JSON value of a text frame

        Raises:
            RuntimeError: If the connection was never opened
            TransportError: If the connection closed or errored
            MalformedFrameError: If a text frame is not JSON
            UnexpectedFrameError: If a binary or other non-text frame arrives
        """
        if self.ws is None:
            raise RuntimeError(f"Cannot receive: {self.name} is not connected")

        msg = await self.ws.receive()

        if msg.type == aiohttp.WSMsgType.TEXT:
            self.frames_received += 1
            try:
                return json.loads(msg.data)
            except json.JSONDecodeError as e:
                raise MalformedFrameError(
                    f"{self.name} sent invalid JSON: {msg.data[:100]}",
                    exchange=self.name,
                    raw=msg.data
                ) from e

        if msg.type in CLOSE_TYPES:
            log_websocket_event(self.name, "closed", f"code={self.ws.close_code}")
            raise TransportError(f"{self.name} connection closed", exchange=self.name)

        if msg.type == aiohttp.WSMsgType.ERROR:
            log_websocket_event(self.name, "error", str(msg.data))
            raise TransportError(f"{self.name} connection error: {msg.data}", exchange=self.name)

        raise UnexpectedFrameError(
            f"{self.name} sent a {msg.type.name} frame where text was expected",
            exchange=self.name,
            kind=msg.type.name
        )

    async def close(self) -> None:
        """
        Close WebSocket and HTTP session.

        Safe to call multiple times.
        """
        if self.ws and not self.ws.closed:
            await self.ws.close()
            self.logger.debug(f"WebSocket closed for {self.name}")

        if self.session and not self.session.closed:
            await self.session.close()
            self.logger.debug(f"Session closed for {self.name}")
