"""
Exchange Adapters Package

One subpackage per supported feed, each with:
- __init__.py: the ExchangeAdapter implementation (request building, parsing)
- schemas.py: Pydantic models of the exchange's ticker frames

Feeds are consumed in a fixed order: Binance, Coinbase, OKX.
"""
