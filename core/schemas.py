"""
Normalized Data Schemas

This module defines the Pydantic models shared by every exchange adapter,
the price cache and the snapshot store.

Key Principle:
    Regardless of which feed a ticker frame comes from (Binance, Coinbase,
    OKX), it is normalized into a Ticker, stored as an Observation, and
    persisted inside a Snapshot. Exchange wire schemas live next to their
    adapter in exchanges/<name>/.

Models:
    - ExchangeConfig: Static per-exchange descriptor from ws_details.json
    - Ticker: One parsed frame (pair key, exchange, price), possibly a no-op
    - Observation: One price sample stored in the cache
    - PairCacheEntry: Observations for one pair plus the aggregate
    - Snapshot: PairKey -> PairCacheEntry, the persisted output
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


# ============================================
# Configuration
# ============================================

class ExchangeConfig(BaseModel):
    """
    Static descriptor of one exchange feed.

    Attributes:
        name: Display name, used as the Observation name (e.g., "binance")
        ws_base_url: WebSocket base address
        req_param: Subscription template; pairs are merged into it

    Example:
        >>> ExchangeConfig(
        ...     name="okx",
        ...     ws_base_url="wss://ws.okx.com:8443/ws/v5/public",
        ...     req_param={"op": "subscribe", "args": []}
        ... )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    ws_base_url: str = Field(..., min_length=1)
    req_param: Dict[str, Any]


# ============================================
# Parsed Frames
# ============================================

class Ticker(BaseModel):
    """
    Result of parsing one inbound frame.

    A no-op ticker (empty pair_key, zero price) stands for heartbeats,
    subscription acks and unrelated events. Callers discard it before it
    reaches the cache.
    """

    model_config = ConfigDict(frozen=True)

    pair_key: str
    exchange: str
    price: float = 0.0

    @classmethod
    def noop(cls, exchange: str) -> "Ticker":
        return cls(pair_key="", exchange=exchange, price=0.0)

    @property
    def is_noop(self) -> bool:
        return not self.pair_key


# ============================================
# Cache & Snapshot
# ============================================

class Observation(BaseModel):
    """One price sample: source exchange name and price."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: float


class PairCacheEntry(BaseModel):
    """
    Observations for one pair collected during the window.

    The aggregate stays 0.0 until the window closes. An entry that never
    received an observation finalizes to NaN, which is written to JSON as
    null and read back as NaN.
    """

    prices: List[Observation] = Field(default_factory=list)
    aggregate: float = 0.0

    @field_validator("aggregate", mode="before")
    @classmethod
    def null_aggregate_is_nan(cls, v: Optional[float]) -> float:
        return math.nan if v is None else v


class Snapshot(RootModel[Dict[str, PairCacheEntry]]):
    """PairKey -> PairCacheEntry mapping, written once per run."""

    def __getitem__(self, key: str) -> PairCacheEntry:
        return self.root[key]

    def __contains__(self, key: str) -> bool:
        return key in self.root

    def __len__(self) -> int:
        return len(self.root)

    def items(self):
        return self.root.items()
