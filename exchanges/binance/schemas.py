"""
Binance Wire Schemas

Individual symbol ticker stream (<symbol>@ticker):

    {
        "e": "24hrTicker",
        "E": 1672515782136,
        "s": "BTCUSDT",
        "c": "28933.33",
        ...
    }

Only the symbol and last price are consumed. Subscription acks look like
{"result": null, "id": 1} and do not match this schema.
"""

from pydantic import BaseModel, ConfigDict, Field


class TickerEventSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str = Field(alias="s")
    last_price: str = Field(alias="c")
