"""
Exchange Manager - Registry of Exchange Adapters

This module keeps the list of supported feeds and pairs each configured
exchange with its adapter.

The exchange configuration file holds exactly three records in a fixed
order (Binance, Coinbase, OKX). Records are matched to adapters by
position; the record's name becomes the adapter's display name, which is
what ends up in every Observation.

Example Usage:
    manager = ExchangeManager()
    configs = load_exchange_configs("ws_details.json")
    for config, adapter in zip(configs, manager.create_adapters(configs)):
        print(config.name, adapter)
"""

from typing import Dict, List, Type

from core.errors import ConfigurationError
from core.exchange_interface import ExchangeAdapter
from core.logging import logger
from core.schemas import ExchangeConfig
from exchanges.binance import BinanceAdapter
from exchanges.coinbase import CoinbaseAdapter
from exchanges.okx import OkxAdapter


class ExchangeManager:
    """
    Central Registry for Exchange Adapters

    Attributes:
        adapters: Adapter classes keyed by exchange id, in feed order

    Example:
        >>> manager = ExchangeManager()
        >>> manager.list_exchanges()
        ['binance', 'coinbase', 'okx']
    """

    def __init__(self):
        self.adapters: Dict[str, Type[ExchangeAdapter]] = {
            "binance": BinanceAdapter,
            "coinbase": CoinbaseAdapter,
            "okx": OkxAdapter,
        }

        logger.debug(f"ExchangeManager initialized with {len(self.adapters)} exchange(s): {', '.join(self.adapters.keys())}")

    # ============================================
    # Adapter Retrieval Methods
    # ============================================

    def get_adapter_class(self, exchange_id: str) -> Type[ExchangeAdapter]:
        """
        Get an adapter class by exchange id.

        Raises:
            ValueError: If the exchange is not supported
        """
        exchange_id = exchange_id.lower()

        if exchange_id not in self.adapters:
            available = ", ".join(self.adapters.keys())
            raise ValueError(
                f"Exchange '{exchange_id}' is not supported. "
                f"Available exchanges: {available}"
            )

        return self.adapters[exchange_id]

    def has_exchange(self, exchange_id: str) -> bool:
        return exchange_id.lower() in self.adapters

    def list_exchanges(self) -> List[str]:
        return list(self.adapters.keys())

    # ============================================
    # Adapter Construction
    # ============================================

    def create_adapters(self, configs: List[ExchangeConfig]) -> List[ExchangeAdapter]:
        """
        Build one adapter per configured exchange.

        Args:
            configs: Exchange records in fixed feed order

        Returns:
            List[ExchangeAdapter]: Adapters in the same order, named after their config

        Raises:
            ConfigurationError: If the number of records does not match the registry
        """
        if len(configs) != len(self.adapters):
            raise ConfigurationError(
                f"Expected {len(self.adapters)} exchange configs "
                f"({', '.join(self.adapters.keys())}), got {len(configs)}"
            )

        adapters = []
        for config, adapter_class in zip(configs, self.adapters.values()):
            if config.name.lower() != adapter_class.exchange_id:
                logger.warning(
                    f"Exchange config '{config.name}' is handled by the "
                    f"{adapter_class.exchange_id} adapter (matched by position)"
                )
            adapters.append(adapter_class(name=config.name))

        return adapters
