"""
Exception hierarchy for the round-trip arbitrage scanner.

Provides specific exception types for the failure categories of a scan so the
poller can tell recoverable per-direction failures from fatal startup errors.
"""

from typing import Any, Dict, Optional


class RoundTripArbitrageError(Exception):
    """Base exception for all round-trip arbitrage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(RoundTripArbitrageError):
    """Raised when there are configuration-related issues."""

    pass


class InvalidAmount(RoundTripArbitrageError):
    """Raised when a decimal/native amount conversion is malformed or out of range."""

    def __init__(
        self,
        message: str,
        amount: Optional[Any] = None,
        decimals: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.amount = amount
        self.decimals = decimals


class QuoteError(RoundTripArbitrageError):
    """Raised when a venue quote cannot be obtained."""

    def __init__(
        self,
        message: str,
        venue: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.venue = venue


class QuoteUnavailable(QuoteError):
    """The venue answered but returned no usable amount."""

    pass


class SourceUnreachable(QuoteError):
    """The venue could not be queried (network failure or timeout)."""

    pass


class PersistenceFailure(RoundTripArbitrageError):
    """Raised when the opportunity store cannot be opened or written."""

    def __init__(
        self,
        message: str,
        db_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.db_path = db_path
