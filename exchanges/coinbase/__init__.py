"""
Coinbase Exchange Adapter

Exchange WebSocket feed:
    wss://ws-feed.exchange.coinbase.com

Subscription is sent as a message on the base URL:

    {"type": "subscribe", "channels": ["ticker"], "product_ids": ["BTC-USDT"]}

Products are labelled BASE-QUOTE and translated back to the PairKey.
Errors arrive as {"type": "error", "message": ..., "reason": ...}.

API Documentation:
    https://docs.cdp.coinbase.com/exchange/docs/websocket-channels
"""

from typing import Any, Dict, List

from pydantic import ValidationError

from core.exchange_interface import ExchangeAdapter
from core.schemas import Ticker
from .schemas import TickerEventSchema


class CoinbaseAdapter(ExchangeAdapter):
    """Coinbase ticker channel codec."""

    exchange_id = "coinbase"
    separator = "-"
    error_field = "type"

    def merge_subscription(self, payload: Dict[str, Any], labels: List[str]) -> None:
        payload.setdefault("product_ids", []).extend(labels)

    def parse_ticker(self, frame: Any) -> Ticker:
        try:
            event = TickerEventSchema.model_validate(frame)
        except ValidationError:
            return Ticker.noop(self.name)

        if not event.product_id:
            return Ticker.noop(self.name)

        return Ticker(
            pair_key=self.to_pair_key(event.product_id),
            exchange=self.name,
            price=self.parse_price("price", event.price)
        )
