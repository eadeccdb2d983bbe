"""
Shared fixtures: exchange configs matching ws_details.json and adapters.
"""

import pytest

from core.schemas import ExchangeConfig
from exchanges.binance import BinanceAdapter
from exchanges.coinbase import CoinbaseAdapter
from exchanges.okx import OkxAdapter


BINANCE_TEMPLATE = {"method": "SUBSCRIBE", "params": [], "id": 1}
COINBASE_TEMPLATE = {"type": "subscribe", "channels": ["ticker"], "product_ids": []}
OKX_TEMPLATE = {"op": "subscribe", "args": []}


@pytest.fixture
def exchange_configs():
    return [
        ExchangeConfig(name="binance", ws_base_url="wss://stream.binance.com:9443", req_param=BINANCE_TEMPLATE),
        ExchangeConfig(name="coinbase", ws_base_url="wss://ws-feed.exchange.coinbase.com", req_param=COINBASE_TEMPLATE),
        ExchangeConfig(name="okx", ws_base_url="wss://ws.okx.com:8443/ws/v5/public", req_param=OKX_TEMPLATE),
    ]


@pytest.fixture
def binance():
    return BinanceAdapter()


@pytest.fixture
def coinbase():
    return CoinbaseAdapter()


@pytest.fixture
def okx():
    return OkxAdapter()
