"""
Core Package

Contains the exchange-agnostic building blocks of the sampler:
- ExchangeAdapter: Abstract wire codec every exchange implements
- ExchangeManager: Registry pairing configured exchanges with adapters
- Schemas: Pydantic models (ExchangeConfig, Ticker, Observation, Snapshot)
- Errors, configuration, logging and pair helpers
"""
