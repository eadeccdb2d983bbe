"""
Unit Tests for SamplingLoop

These tests drive the loop with scripted in-memory feeds and a short
timer period. They verify that:
- Feeds are connected and subscribed one after another, in order
- Frames from all feeds reach the cache through their adapters
- No-op frames and unrequested pairs never reach the cache
- The second timer tick closes the window and writes the snapshot
- A fatal feed error aborts the run without a snapshot

Run with:
    pytest tests/unit/test_sampling_loop.py -v
"""

import asyncio
import math
from unittest.mock import patch

import pytest

from core.config import Settings
from core.errors import NumericParseError, ProtocolError, TransportError
from services.price_cache import PriceCache
from services.sampling_loop import SamplingLoop, SamplingState, run_sampling
from storage.snapshot_store import SnapshotStore


INTERVAL = 0.2


# ============================================
# Scripted Feed
# ============================================

class ScriptedFeed:
    """
    Stand-in for FeedSession.

    receive() returns the scripted frames in order (raising any scripted
    exception), then blocks until cancelled like an idle connection.
    """

    def __init__(self, adapter, frames=(), calls=None):
        self.adapter = adapter
        self.name = adapter.name
        self.frames = list(frames)
        self.calls = calls if calls is not None else []
        self.cancelled = False

    async def connect(self):
        self.calls.append(f"{self.name}.connect")

    async def subscribe(self):
        self.calls.append(f"{self.name}.subscribe")

    async def receive(self):
        if self.frames:
            item = self.frames.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        try:
            await asyncio.get_running_loop().create_future()
        except asyncio.CancelledError:
            self.cancelled = True
            raise


def make_loop(tmp_path, feeds, pairs=("btc_usdt",)):
    cache = PriceCache()
    cache.seed(pairs)
    store = SnapshotStore(tmp_path / "exchanges.json")
    return SamplingLoop(feeds, cache, store, interval=INTERVAL), store


# ============================================
# Tests for Startup
# ============================================

class TestStartup:

    @pytest.mark.asyncio
    async def test_feeds_start_sequentially_in_order(self, tmp_path, binance, coinbase, okx):
        calls = []
        feeds = [ScriptedFeed(a, calls=calls) for a in (binance, coinbase, okx)]
        loop, _ = make_loop(tmp_path, feeds)

        await loop.start_feeds()

        assert calls == [
            "binance.connect", "binance.subscribe",
            "coinbase.connect", "coinbase.subscribe",
            "okx.connect", "okx.subscribe",
        ]
        assert loop.state == SamplingState.SUBSCRIBING


# ============================================
# Tests for Sampling Window
# ============================================

class TestSampling:

    @pytest.mark.asyncio
    async def test_run_aggregates_all_feeds(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance, [{"result": None, "id": 1}, {"s": "BTCUSDT", "c": "100"}]),
            ScriptedFeed(coinbase, [{"type": "subscriptions", "channels": []},
                                    {"type": "ticker", "product_id": "BTC-USDT", "price": "102"}]),
            ScriptedFeed(okx, [{"event": "subscribe", "arg": {}},
                               {"data": [{"instId": "BTC-USDT", "last": "104"}]}]),
        ]
        loop, store = make_loop(tmp_path, feeds)

        snapshot = await loop.run()

        entry = snapshot["BTCUSDT"]
        assert entry.aggregate == pytest.approx(102.0)
        assert sorted((o.name, o.price) for o in entry.prices) == [
            ("binance", 100.0), ("coinbase", 102.0), ("okx", 104.0)
        ]
        assert loop.state == SamplingState.TERMINATED
        assert loop.window == 2
        assert loop.frames_handled == 6
        assert loop.observations_stored == 3
        assert store.read()["BTCUSDT"].aggregate == pytest.approx(102.0)

    @pytest.mark.asyncio
    async def test_unrequested_pairs_are_dropped(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance, [{"s": "XRPUSDT", "c": "0.5"}, {"s": "BTCUSDT", "c": "10"}]),
            ScriptedFeed(coinbase),
            ScriptedFeed(okx, [{"data": [{"instId": "ETH-USDT", "last": "99"}]}]),
        ]
        loop, _ = make_loop(tmp_path, feeds)

        snapshot = await loop.run()

        assert list(snapshot.root) == ["BTCUSDT"]
        assert [o.price for o in snapshot["BTCUSDT"].prices] == [10.0]

    @pytest.mark.asyncio
    async def test_instrument_suffix_is_stored_under_spot_key(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance),
            ScriptedFeed(coinbase),
            ScriptedFeed(okx, [{"data": [{"instId": "BTC-USDT-SWAP", "last": "99"}]}]),
        ]
        loop, _ = make_loop(tmp_path, feeds)

        snapshot = await loop.run()

        assert [(o.name, o.price) for o in snapshot["BTCUSDT"].prices] == [("okx", 99.0)]
        assert loop.observations_stored == 1

    @pytest.mark.asyncio
    async def test_idle_feeds_yield_nan_and_are_cancelled(self, tmp_path, binance, coinbase, okx):
        feeds = [ScriptedFeed(a) for a in (binance, coinbase, okx)]
        loop, store = make_loop(tmp_path, feeds, pairs=("btc_usdt", "eth_usdt"))

        snapshot = await loop.run()

        assert math.isnan(snapshot["BTCUSDT"].aggregate)
        assert math.isnan(snapshot["ETHUSDT"].aggregate)
        assert all(feed.cancelled for feed in feeds)
        assert (tmp_path / "exchanges.json").exists()

    @pytest.mark.asyncio
    async def test_window_closes_on_second_tick(self, tmp_path, binance, coinbase, okx):
        feeds = [ScriptedFeed(a) for a in (binance, coinbase, okx)]
        loop, _ = make_loop(tmp_path, feeds)

        started = asyncio.get_running_loop().time()
        await loop.run()
        elapsed = asyncio.get_running_loop().time() - started

        assert elapsed >= INTERVAL * 0.9
        assert elapsed < INTERVAL * 5

    def test_handle_tick_flips_then_closes(self, tmp_path, binance):
        loop, _ = make_loop(tmp_path, [ScriptedFeed(binance)])

        assert loop.handle_tick() is False
        assert loop.window == 2
        assert loop.handle_tick() is True


# ============================================
# Tests for Fatal Errors
# ============================================

class TestFatalErrors:

    @pytest.mark.asyncio
    async def test_protocol_error_aborts_without_snapshot(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance),
            ScriptedFeed(coinbase),
            ScriptedFeed(okx, [{"event": "error", "code": "60012", "msg": "Invalid request"}]),
        ]
        loop, _ = make_loop(tmp_path, feeds)

        with pytest.raises(ProtocolError):
            await loop.run()

        assert loop.state == SamplingState.SAMPLING
        assert not (tmp_path / "exchanges.json").exists()
        assert feeds[0].cancelled and feeds[1].cancelled

    @pytest.mark.asyncio
    async def test_numeric_parse_error_is_fatal(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance, [{"s": "BTCUSDT", "c": "not-a-price"}]),
            ScriptedFeed(coinbase),
            ScriptedFeed(okx),
        ]
        loop, _ = make_loop(tmp_path, feeds)

        with pytest.raises(NumericParseError):
            await loop.run()

        assert not (tmp_path / "exchanges.json").exists()

    @pytest.mark.asyncio
    async def test_transport_error_from_receive_propagates(self, tmp_path, binance, coinbase, okx):
        feeds = [
            ScriptedFeed(binance),
            ScriptedFeed(coinbase, [TransportError("coinbase connection closed", exchange="coinbase")]),
            ScriptedFeed(okx),
        ]
        loop, _ = make_loop(tmp_path, feeds)

        with pytest.raises(TransportError):
            await loop.run()


# ============================================
# Tests for run_sampling
# ============================================

class ScriptedSession(ScriptedFeed):
    """FeedSession replacement accepted by run_sampling"""

    script = {}
    instances = []

    def __init__(self, config, adapter, pairs, heartbeat=None):
        super().__init__(adapter, self.script.get(adapter.name, []))
        self.config = config
        self.pairs = pairs
        self.exited = False
        ScriptedSession.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited = True


class TestRunSampling:

    @pytest.mark.asyncio
    async def test_run_sampling_wires_everything(self, tmp_path, exchange_configs):
        ScriptedSession.script = {
            "binance": [{"s": "ETHUSDT", "c": "2000"}],
            "okx": [{"data": [{"instId": "ETH-USDT", "last": "2002"}]}],
        }
        ScriptedSession.instances = []
        config = Settings(snapshot_path=str(tmp_path / "out.json"), sample_interval_seconds=INTERVAL)

        with patch("services.sampling_loop.FeedSession", ScriptedSession):
            snapshot = await run_sampling(exchange_configs, ["eth_usdt"], config)

        assert snapshot["ETHUSDT"].aggregate == pytest.approx(2001.0)
        assert [s.name for s in ScriptedSession.instances] == ["binance", "coinbase", "okx"]
        assert all(s.exited for s in ScriptedSession.instances)
        assert all(s.pairs == ["eth_usdt"] for s in ScriptedSession.instances)
        assert (tmp_path / "out.json").exists()
