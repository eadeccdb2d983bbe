"""
OKX Exchange Adapter

Public WebSocket:
    wss://ws.okx.com:8443/ws/v5/public

Subscription request, one arg per instrument:

    {"op": "subscribe", "args": [{"channel": "tickers", "instId": "BTC-USDT"}]}

Instruments are labelled BASE-QUOTE. Errors arrive as
{"event": "error", "code": "60012", "msg": ...}.

API Documentation:
    https://www.okx.com/docs-v5/en/#public-data-websocket-tickers-channel
"""

from typing import Any, Dict, List

from pydantic import ValidationError

from core.exchange_interface import ExchangeAdapter
from core.schemas import Ticker
from .schemas import TickerUpdateSchema


class OkxAdapter(ExchangeAdapter):
    """
    OKX tickers channel codec.

    Only the first entry of a push is used; OKX sends one instrument per
    tickers message.
    """

    exchange_id = "okx"
    separator = "-"
    error_field = "event"

    CHANNEL = "tickers"

    def merge_subscription(self, payload: Dict[str, Any], labels: List[str]) -> None:
        payload.setdefault("args", []).extend(
            {"channel": self.CHANNEL, "instId": label} for label in labels
        )

    def parse_ticker(self, frame: Any) -> Ticker:
        try:
            update = TickerUpdateSchema.model_validate(frame)
        except ValidationError:
            return Ticker.noop(self.name)

        if not update.data:
            return Ticker.noop(self.name)

        event = update.data[0]
        return Ticker(
            pair_key=self.to_pair_key(event.inst_id),
            exchange=self.name,
            price=self.parse_price("last", event.last)
        )
