"""
Exchange Adapter - Wire Codec Contract for All Feeds

This module defines the abstract base class every exchange adapter
implements. An adapter knows exactly one exchange's wire protocol:

- how to address the feed (connection URL)
- how to build the subscription request from the configured template
- how to turn an inbound JSON frame into a normalized Ticker, or detect
  the exchange's error sentinel

The sampling loop and feed sessions only talk to ExchangeAdapter; the
adapter is chosen once when a session is built, never by branching on an
exchange tag at call sites.

Parse Contract:
    1. Error sentinel present     -> raise ProtocolError (payload attached)
    2. Frame not a ticker         -> Ticker.noop(name) (heartbeat, ack, ...)
    3. Price string not a number  -> raise NumericParseError
    4. Otherwise                  -> Ticker(pair_key, name, price)
"""

import copy
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from core.errors import NumericParseError, ProtocolError
from core.pairs import is_valid_pair, pair_key_from_label, split_pair
from core.schemas import Ticker


class ExchangeAdapter(ABC):
    """
    Abstract Base Class for Exchange Adapters

    Class Attributes:
        exchange_id: Registry identifier (lowercase, e.g., "binance")
        separator: Separator between base and quote in the exchange's labels
        error_field / error_value: The exchange's error sentinel

    Instance Attributes:
        name: Display name from ExchangeConfig, stamped on every Ticker

    Abstract Methods (MUST be implemented):
        - pair_label: Render one requested pair in exchange notation
        - merge_subscription: Append rendered pairs to the template
        - parse_ticker: Decode a non-error frame into a Ticker
    """

    exchange_id: str
    separator: str = ""
    error_field: str
    error_value: str = "error"

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.exchange_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # ============================================
    # Pair Notation
    # ============================================

    def pair_label(self, token: str) -> str:
        """
        Render a `base_quote` token in exchange notation.

        Example:
            >>> CoinbaseAdapter().pair_label("btc_usdt")
            'BTC-USDT'
        """
        base, quote = split_pair(token)
        return f"{base.upper()}{self.separator}{quote.upper()}"

    def to_pair_key(self, label: str) -> str:
        """Translate an exchange label back to a PairKey."""
        return pair_key_from_label(label, self.separator)

    def pair_labels(self, pairs: Iterable[str]) -> List[str]:
        """
        Labels for every well-formed token, in input order.

        Malformed tokens are skipped; callers validate the batch beforehand.
        """
        return [self.pair_label(token) for token in pairs if is_valid_pair(token)]

    # ============================================
    # Connection & Subscription
    # ============================================

    def connection_url(self, base_url: str, pairs: List[str]) -> str:
        """
        Address to open for this feed.

        Most exchanges subscribe purely by message, so the base URL is used
        as-is. Adapters that encode streams in the path override this.
        """
        return base_url

    def build_subscription(self, template: Dict[str, Any], pairs: List[str]) -> Dict[str, Any]:
        """
        Build the subscription request payload.

        Args:
            template: req_param from ExchangeConfig (left untouched)
            pairs: Requested `base_quote` tokens

        Returns:
            Dict: Copy of the template with the pairs merged in, key order preserved
        """
        payload = copy.deepcopy(template)
        self.merge_subscription(payload, self.pair_labels(pairs))
        return payload

    @abstractmethod
    def merge_subscription(self, payload: Dict[str, Any], labels: List[str]) -> None:
        """Append exchange labels to the template's list field, in place."""
        ...

    # ============================================
    # Frame Parsing
    # ============================================

    def is_error(self, frame: Any) -> bool:
        return isinstance(frame, dict) and frame.get(self.error_field) == self.error_value

    def parse(self, frame: Any) -> Ticker:
        """
        Parse one decoded JSON frame.

        Raises:
            ProtocolError: If the exchange's error sentinel is set
            NumericParseError: If the price field is malformed
        """
        if self.is_error(frame):
            raise ProtocolError(
                f"{self.name} responded with an error: {frame!r}",
                exchange=self.name,
                payload=frame
            )
        return self.parse_ticker(frame)

    @abstractmethod
    def parse_ticker(self, frame: Any) -> Ticker:
        """Decode a frame that passed the error check."""
        ...

    def parse_price(self, field: str, value: str) -> float:
        """
        Prices travel as strings on every feed.

        "NaN" and "inf" parse as floats but are not prices, so they are
        rejected like any other malformed value.
        """
        try:
            price = float(value)
        except ValueError as e:
            raise NumericParseError(
                f"{self.name} sent a malformed {field!r} value: {value!r}",
                exchange=self.name,
                field=field,
                value=value
            ) from e

        if not math.isfinite(price):
            raise NumericParseError(
                f"{self.name} sent a non-finite {field!r} value: {value!r}",
                exchange=self.name,
                field=field,
                value=value
            )
        return price
