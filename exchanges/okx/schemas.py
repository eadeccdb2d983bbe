"""
OKX Wire Schemas

Tickers channel push:

    {
        "arg": {"channel": "tickers", "instId": "BTC-USDT"},
        "data": [
            {"instType": "SPOT", "instId": "BTC-USDT", "last": "28933.33", ...}
        ]
    }

Subscribe acks ({"event": "subscribe", "arg": {...}}) carry no data field
and fail validation, which the adapter maps to a no-op.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TickerDataSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    inst_id: str = Field(alias="instId")
    last: str


class TickerUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: List[TickerDataSchema]
