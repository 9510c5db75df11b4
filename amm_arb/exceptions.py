"""
Exception hierarchy for the AMM arbitrage scanner.

Provides specific exception types for different error categories so callers
can tell caller defects (bad snapshots, bad config) apart from each other.
An empty opportunity list is never an error.
"""

from typing import Any, Dict, Optional


class AmmArbError(Exception):
    """Base exception for all AMM arbitrage scanner errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(AmmArbError):
    """Raised when there are configuration-related issues."""

    pass


class ValidationError(AmmArbError):
    """Raised when validation of data or configuration fails."""

    pass


class SnapshotError(ValidationError):
    """Raised when a pool snapshot record is malformed."""

    def __init__(
        self,
        message: str,
        record_index: Optional[int] = None,
        pool_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.record_index = record_index
        self.pool_id = pool_id


class DataError(AmmArbError):
    """Raised when an input document cannot be read or has the wrong shape."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.source = source
