"""
Price Cache & Aggregator

In-memory store of price observations per requested pair.

Lifecycle:
    seed(pairs)   - one empty entry per requested PairKey, before any frame
    update(...)   - append an Observation; pairs never seeded are dropped
    finalize()    - compute the arithmetic mean per pair, exactly once

The cache is owned by the sampling loop and only mutated from it, one
event at a time, so it needs no locking.
"""

import math
from statistics import fmean
from typing import Dict, Iterable, List, Optional

from core.logging import get_logger
from core.pairs import pair_key_from_token
from core.schemas import Observation, PairCacheEntry, Snapshot


class PriceCache:
    """
    PairKey -> PairCacheEntry store.

    Example:
        >>> cache = PriceCache()
        >>> cache.seed(["btc_usdt"])
        >>> cache.update("BTCUSDT", "binance", 28933.33)
        True
        >>> cache.update("XRPUSDT", "binance", 0.52)
        False
        >>> cache.finalize()["BTCUSDT"].aggregate
        28933.33
    """

    def __init__(self) -> None:
        self._entries: Dict[str, PairCacheEntry] = {}
        self._finalized = False
        self._logger = get_logger(__name__)

    def seed(self, pairs: Iterable[str]) -> None:
        """
        Create an empty entry for every requested `base_quote` token.

        Raises:
            InvalidPairError: If a token is malformed
        """
        for token in pairs:
            key = pair_key_from_token(token)
            self._entries.setdefault(key, PairCacheEntry())
        self._logger.debug(f"Seeded price cache with {len(self._entries)} pair(s): {', '.join(self._entries)}")

    def update(self, pair_key: str, exchange_name: str, price: float) -> bool:
        """
        Record one observation.

        Returns:
            bool: True if stored, False if the pair was never seeded

        Raises:
            RuntimeError: If the cache was already finalized
        """
        if self._finalized:
            raise RuntimeError("Price cache is finalized; no further updates allowed")

        entry = self._entries.get(pair_key)
        if entry is None:
            self._logger.debug(f"Dropped {exchange_name} price for unrequested pair {pair_key}")
            return False

        entry.prices.append(Observation(name=exchange_name, price=price))
        return True

    def finalize(self) -> Snapshot:
        """
        Close the window: aggregate = mean of collected prices.

        An entry without observations gets NaN, not 0.

        Raises:
            RuntimeError: If called twice
        """
        if self._finalized:
            raise RuntimeError("Price cache already finalized")

        for key, entry in self._entries.items():
            if entry.prices:
                entry.aggregate = fmean(o.price for o in entry.prices)
            else:
                entry.aggregate = math.nan
                self._logger.warning(f"No prices collected for {key}")

        self._finalized = True
        return self.snapshot()

    # ============================================
    # Accessors
    # ============================================

    @property
    def finalized(self) -> bool:
        return self._finalized

    def snapshot(self) -> Snapshot:
        """Deep copy of the current entries."""
        return Snapshot({key: entry.model_copy(deep=True) for key, entry in self._entries.items()})

    def get(self, pair_key: str) -> Optional[PairCacheEntry]:
        return self._entries.get(pair_key)

    def keys(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, pair_key: str) -> bool:
        return pair_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
