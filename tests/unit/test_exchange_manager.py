"""
Unit Tests for ExchangeManager

Run with:
    pytest tests/unit/test_exchange_manager.py -v
"""

import pytest
from pydantic import ValidationError

from core.errors import ConfigurationError
from core.exchange_manager import ExchangeManager
from core.schemas import ExchangeConfig
from exchanges.binance import BinanceAdapter
from exchanges.coinbase import CoinbaseAdapter
from exchanges.okx import OkxAdapter


@pytest.fixture
def manager():
    return ExchangeManager()


class TestRegistry:

    def test_fixed_exchange_order(self, manager):
        assert manager.list_exchanges() == ["binance", "coinbase", "okx"]

    def test_get_adapter_class_case_insensitive(self, manager):
        assert manager.get_adapter_class("OKX") is OkxAdapter
        assert manager.has_exchange("Coinbase") is True

    def test_unknown_exchange_raises(self, manager):
        with pytest.raises(ValueError, match="not supported"):
            manager.get_adapter_class("kraken")


class TestCreateAdapters:

    def test_adapters_match_config_positions(self, manager, exchange_configs):
        adapters = manager.create_adapters(exchange_configs)

        assert [type(a) for a in adapters] == [BinanceAdapter, CoinbaseAdapter, OkxAdapter]
        assert [a.name for a in adapters] == ["binance", "coinbase", "okx"]

    def test_display_name_comes_from_config(self, manager, exchange_configs):
        renamed = [c.model_copy(update={"name": f"{c.name}-feed"}) for c in exchange_configs]

        adapters = manager.create_adapters(renamed)

        assert isinstance(adapters[2], OkxAdapter)
        assert adapters[2].name == "okx-feed"

    def test_wrong_number_of_configs_raises(self, manager, exchange_configs):
        with pytest.raises(ConfigurationError, match="Expected 3"):
            manager.create_adapters(exchange_configs[:2])

    def test_empty_config_list_raises(self, manager):
        with pytest.raises(ConfigurationError):
            manager.create_adapters([])


class TestExchangeConfigSchema:

    def test_config_is_immutable(self, exchange_configs):
        with pytest.raises(ValidationError):
            exchange_configs[0].name = "other"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ExchangeConfig(name="", ws_base_url="wss://example", req_param={})
