"""
Sampling Loop

The single coordinator of a sampling run:

    CONNECTING -> SUBSCRIBING -> SAMPLING(window=1) -> SAMPLING(window=2)
               -> FINALIZING -> TERMINATED

Startup connects and subscribes each feed in turn (Binance, Coinbase, OKX),
never concurrently. Sampling then waits on whichever of the feed receives
or the timer completes first and services exactly one ready source per
iteration, so frame handling never interleaves and the price cache needs no
locking. When several sources are ready at once they are taken round-robin.

The timer's first tick fires as sampling starts and only flips the window
flag; the second tick closes the window: aggregates are computed, the
snapshot is written, and outstanding receives are cancelled unconsumed.

Any error raised by a feed (transport, protocol, numeric, ...) aborts the
run before a snapshot is written.
"""

import asyncio
from contextlib import AsyncExitStack
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from core.config import Settings, settings
from core.exchange_manager import ExchangeManager
from core.logging import get_logger
from core.schemas import ExchangeConfig, Snapshot
from core.utils.time import Interval
from services.feed_session import FeedSession
from services.price_cache import PriceCache
from storage.snapshot_store import SnapshotStore


class SamplingState(str, Enum):
    CONNECTING = "connecting"
    SUBSCRIBING = "subscribing"
    SAMPLING = "sampling"
    FINALIZING = "finalizing"
    TERMINATED = "terminated"


class SamplingLoop:
    """
    Fixed-window sampling state machine.

    Attributes:
        feeds: Feed sessions in startup order
        cache: Seeded price cache, mutated only by this loop
        store: Where the snapshot is written
        interval: Timer period in seconds
        state: Current SamplingState
        window: 1 or 2 while sampling (0 before)
        frames_handled: Frames parsed during the window
        observations_stored: Frames that reached the cache

    Example:
        >>> loop = SamplingLoop(feeds, cache, SnapshotStore("exchanges.json"), interval=10)
        >>> snapshot = await loop.run()
    """

    def __init__(
        self,
        feeds: Sequence[FeedSession],
        cache: PriceCache,
        store: SnapshotStore,
        interval: float
    ):
        self.feeds = list(feeds)
        self.cache = cache
        self.store = store
        self.interval = interval

        self.state = SamplingState.CONNECTING
        self.window = 0
        self.frames_handled = 0
        self.observations_stored = 0

        self._window_flag = False
        self._cursor = 0
        self._logger = get_logger(__name__)

    # ============================================
    # Run
    # ============================================

    async def run(self) -> Snapshot:
        """
        Start every feed, sample one window, persist the snapshot.

        Returns:
            Snapshot: The finalized cache as written to the store

        Raises:
            AggregatorError: Any feed or persistence failure (fatal)
        """
        await self.start_feeds()
        await self.sample()
        return self.finalize()

    async def start_feeds(self) -> None:
        for feed in self.feeds:
            self._transition(SamplingState.CONNECTING, feed.name)
            await feed.connect()
            self._transition(SamplingState.SUBSCRIBING, feed.name)
            await feed.subscribe()

    async def sample(self) -> None:
        """Multiplex feed frames and timer ticks until the window closes."""
        timer = Interval(self.interval)
        sources: List[Any] = [*self.feeds, timer]

        self._transition(SamplingState.SAMPLING)
        self.window = 1

        pending: Dict[Any, asyncio.Task] = {
            source: self._arm(source) for source in sources
        }

        try:
            while True:
                await asyncio.wait(pending.values(), return_when=asyncio.FIRST_COMPLETED)

                source = self._next_ready(sources, pending)
                result = pending.pop(source).result()

                if source is timer:
                    if self.handle_tick():
                        break
                else:
                    self.handle_frame(source, result)

                pending[source] = self._arm(source)
        finally:
            for task in pending.values():
                task.cancel()
            await asyncio.gather(*pending.values(), return_exceptions=True)

    def finalize(self) -> Snapshot:
        self._transition(SamplingState.FINALIZING)
        snapshot = self.cache.finalize()
        self.store.write(snapshot)
        self._transition(SamplingState.TERMINATED)

        self._logger.info(
            f"Window closed: {self.frames_handled} frame(s), "
            f"{self.observations_stored} observation(s) across {len(snapshot)} pair(s)"
        )
        return snapshot

    # ============================================
    # Event Handling
    # ============================================

    def handle_frame(self, feed: FeedSession, frame: Any) -> None:
        """Route one frame through its feed's adapter into the cache."""
        ticker = feed.adapter.parse(frame)
        self.frames_handled += 1

        if ticker.is_noop:
            self._logger.debug(f"Ignored non-ticker frame from {feed.name}")
            return

        if self.cache.update(ticker.pair_key, ticker.exchange, ticker.price):
            self.observations_stored += 1

    def handle_tick(self) -> bool:
        """
        Returns:
            bool: True when the tick closes the window
        """
        if self._window_flag:
            return True

        self._window_flag = True
        self.window = 2
        self._logger.debug("First timer tick; sampling until the next one")
        return False

    # ============================================
    # Helpers
    # ============================================

    def _arm(self, source: Any) -> asyncio.Task:
        if isinstance(source, Interval):
            return asyncio.create_task(source.tick(), name="sampling_timer")
        return asyncio.create_task(source.receive(), name=f"receive_{source.name}")

    def _next_ready(self, sources: List[Any], pending: Dict[Any, asyncio.Task]) -> Any:
        count = len(sources)
        for offset in range(count):
            index = (self._cursor + offset) % count
            source = sources[index]
            if pending[source].done():
                self._cursor = index + 1
                return source
        raise RuntimeError("asyncio.wait returned without a completed source")

    def _transition(self, state: SamplingState, detail: Optional[str] = None) -> None:
        self.state = state
        suffix = f" ({detail})" if detail else ""
        self._logger.debug(f"Sampling state -> {state.value}{suffix}")


# ============================================
# Entry Point
# ============================================

async def run_sampling(
    configs: List[ExchangeConfig],
    pairs: List[str],
    config: Optional[Settings] = None,
    manager: Optional[ExchangeManager] = None
) -> Snapshot:
    """
    Build feeds for the configured exchanges and run one sampling window.

    Args:
        configs: Exchange records in fixed order (Binance, Coinbase, OKX)
        pairs: Validated `base_quote` tokens
        config: Runtime settings (defaults to the global instance)
        manager: Adapter registry (defaults to a fresh ExchangeManager)

    Returns:
        Snapshot: What was written to config.snapshot_path
    """
    config = config or settings
    manager = manager or ExchangeManager()

    adapters = manager.create_adapters(configs)

    cache = PriceCache()
    cache.seed(pairs)

    store = SnapshotStore(config.snapshot_path)

    async with AsyncExitStack() as stack:
        feeds = []
        for exchange_config, adapter in zip(configs, adapters):
            feed = FeedSession(
                exchange_config,
                adapter,
                pairs,
                heartbeat=config.ws_heartbeat_seconds
            )
            feeds.append(await stack.enter_async_context(feed))

        loop = SamplingLoop(feeds, cache, store, config.sample_interval_seconds)
        return await loop.run()
