"""
Binance Exchange Adapter

Spot ticker streams:
    wss://stream.binance.com:9443/ws/<symbol>@ticker[/<symbol>@ticker...]

Binance addresses streams in the URL path and also accepts a SUBSCRIBE
request on the open connection:

    {"method": "SUBSCRIBE", "params": ["BTCUSDT@ticker"], "id": 1}

Labels carry no separator, so the reported symbol ("BTCUSDT") already is
the PairKey. Errors are signalled with {"result": "error", ...}.

API Documentation:
    https://binance-docs.github.io/apidocs/spot/en/#websocket-market-streams
"""

from typing import Any, Dict, List

from pydantic import ValidationError

from core.exchange_interface import ExchangeAdapter
from core.schemas import Ticker
from .schemas import TickerEventSchema


class BinanceAdapter(ExchangeAdapter):
    """
    Binance spot ticker codec.

    Example:
        >>> adapter = BinanceAdapter()
        >>> adapter.build_subscription({"method": "SUBSCRIBE", "params": [], "id": 1}, ["btc_usdt"])
        {'method': 'SUBSCRIBE', 'params': ['BTCUSDT@ticker'], 'id': 1}
        >>> adapter.connection_url("wss://stream.binance.com:9443", ["btc_usdt"])
        'wss://stream.binance.com:9443/ws/btcusdt@ticker'
    """

    exchange_id = "binance"
    separator = ""
    error_field = "result"

    STREAM = "ticker"

    def connection_url(self, base_url: str, pairs: List[str]) -> str:
        streams = "".join(
            f"/{label.lower()}@{self.STREAM}" for label in self.pair_labels(pairs)
        )
        return f"{base_url}/ws{streams}"

    def merge_subscription(self, payload: Dict[str, Any], labels: List[str]) -> None:
        payload.setdefault("params", []).extend(f"{label}@{self.STREAM}" for label in labels)

    def parse_ticker(self, frame: Any) -> Ticker:
        try:
            event = TickerEventSchema.model_validate(frame)
        except ValidationError:
            return Ticker.noop(self.name)

        if not event.symbol:
            return Ticker.noop(self.name)

        return Ticker(
            pair_key=self.to_pair_key(event.symbol),
            exchange=self.name,
            price=self.parse_price("c", event.last_price)
        )
