"""
Trading Pair Helpers

Users request pairs as comma-separated `base_quote` tokens
(e.g. "btc_usdt,eth_usdt"). Internally every pair is identified by its
PairKey: base and quote upper-cased and concatenated with no separator
("BTCUSDT"). Exchange labels such as "BTC-USDT" translate to the same key.
"""

from typing import List, Tuple

from core.errors import InvalidPairError
from core.logging import get_logger

logger = get_logger(__name__)

PAIR_SEPARATOR = "_"
LIST_SEPARATOR = ","


def pair_key(base: str, quote: str) -> str:
    """
    Build the canonical PairKey.

    Example:
        >>> pair_key("btc", "usdt")
        'BTCUSDT'
    """
    return f"{base.upper()}{quote.upper()}"


def is_valid_pair(token: str) -> bool:
    """True when the token has exactly two non-empty parts on "_"."""
    parts = token.split(PAIR_SEPARATOR)
    return len(parts) == 2 and all(parts)


def split_pair(token: str) -> Tuple[str, str]:
    """
    Split a `base_quote` token into its two symbols.

    Raises:
        InvalidPairError: If the token does not have exactly two non-empty parts
    """
    if not is_valid_pair(token):
        raise InvalidPairError(f"Pair '{token}' is not in base_quote format", token=token)
    base, quote = token.split(PAIR_SEPARATOR)
    return base, quote


def pair_key_from_token(token: str) -> str:
    """
    Example:
        >>> pair_key_from_token("eth_usdt")
        'ETHUSDT'
    """
    return pair_key(*split_pair(token))


def pair_key_from_label(label: str, separator: str = "") -> str:
    """
    Translate an exchange pair label back to a PairKey.

    Args:
        label: Pair as reported by the exchange (e.g., "btc-usdt")
        separator: The exchange's separator ("" when labels are already canonical)

    Only the first two segments are used; instrument suffixes such as
    "-SWAP" are ignored.

    Example:
        >>> pair_key_from_label("btc-usdt", "-")
        'BTCUSDT'
        >>> pair_key_from_label("BTC-USDT-SWAP", "-")
        'BTCUSDT'
    """
    if not separator:
        return label.upper()
    segments = label.split(separator)
    if len(segments) < 2:
        return label.upper()
    return pair_key(segments[0], segments[1])


def check_pairs(pairs: str) -> bool:
    """
    Validate a comma-separated pair list.

    Every token must split into exactly two non-empty parts on "_";
    a single bad token invalidates the whole batch.

    Example:
        >>> check_pairs("btc_usdt,eth_usdt")
        True
        >>> check_pairs("btcusdt,eth_usdt")
        False
    """
    tokens = pairs.split(LIST_SEPARATOR)

    valid = 0
    for index, token in enumerate(tokens):
        try:
            split_pair(token)
        except InvalidPairError:
            logger.error(f"Pair {index}: {token} is not valid format")
            continue
        logger.info(f"Pair {index}: {token}")
        valid += 1

    return valid == len(tokens)


def parse_pairs(pairs: str) -> List[str]:
    """
    Split a validated pair list into tokens, keeping input order.

    Raises:
        InvalidPairError: If any token is malformed
    """
    tokens = pairs.split(LIST_SEPARATOR)
    for token in tokens:
        split_pair(token)
    return tokens
