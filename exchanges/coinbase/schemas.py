"""
Coinbase Wire Schemas

Ticker channel message:

    {
        "type": "ticker",
        "sequence": 37475248783,
        "product_id": "BTC-USDT",
        "price": "28933.33",
        ...
    }

The "subscriptions" confirmation carries no product_id/price and is
treated as a no-op.
"""

from pydantic import BaseModel, ConfigDict


class TickerEventSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: str
    price: str
