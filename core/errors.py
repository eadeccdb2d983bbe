"""
Error Kinds

Closed hierarchy of failures the sampler can run into. Everything below
AggregatorError is fatal to a sampling run: there is no retry or reconnect,
the top level reports the error once and exits without writing a snapshot.

Hierarchy:
    AggregatorError
    ├── ConfigurationError      - bad settings or ws_details.json
    ├── InvalidPairError        - pair token not in base_quote form
    ├── PersistenceError        - snapshot could not be written or read
    └── FeedError               - anything tied to one exchange feed
        ├── TransportError      - connect/handshake failure, connection closed
        ├── FrameSendError      - subscription frame could not be sent
        ├── MalformedFrameError - text frame is not valid JSON
        ├── ProtocolError       - exchange reported an error payload
        ├── NumericParseError   - price field is not a number
        └── UnexpectedFrameError - non-text frame where text was required
"""

from typing import Any, Dict, Optional


class AggregatorError(Exception):
    """Base class for all sampler failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(AggregatorError):
    """Settings or exchange configuration file is missing or invalid."""


class InvalidPairError(AggregatorError):
    """A requested pair token does not split into base and quote."""

    def __init__(self, message: str, token: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.token = token


class PersistenceError(AggregatorError):
    """Snapshot file could not be written or read back."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


# ============================================
# Feed Errors
# ============================================

class FeedError(AggregatorError):
    """Failure on one exchange feed."""

    def __init__(self, message: str, exchange: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.exchange = exchange


class TransportError(FeedError):
    """Connection could not be opened, or was closed by the remote end."""


class FrameSendError(FeedError):
    """Outbound subscription frame could not be sent."""


class MalformedFrameError(FeedError):
    """Inbound text frame is not valid JSON."""

    def __init__(self, message: str, raw: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw = raw


class ProtocolError(FeedError):
    """
    Exchange answered with its error sentinel.

    The offending payload is kept on the exception for diagnostics.
    """

    def __init__(self, message: str, payload: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.payload = payload


class NumericParseError(FeedError):
    """Wire-encoded price string does not parse as a float."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class UnexpectedFrameError(FeedError):
    """A non-text frame arrived where a text frame was required."""

    def __init__(self, message: str, kind: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind


__all__ = [
    "AggregatorError",
    "ConfigurationError",
    "InvalidPairError",
    "PersistenceError",
    "FeedError",
    "TransportError",
    "FrameSendError",
    "MalformedFrameError",
    "ProtocolError",
    "NumericParseError",
    "UnexpectedFrameError",
]
