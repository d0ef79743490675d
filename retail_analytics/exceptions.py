"""
Exception hierarchy for Retail Sales Analytics.

Invalid rows are never surfaced as errors; they are filtered out during
validation. Exceptions are reserved for invalid caller arguments.
"""

from __future__ import annotations


class RetailAnalyticsError(Exception):
    """Base exception for all application-specific errors."""


class InvalidArgument(RetailAnalyticsError, ValueError):
    """Raised when an operation receives an argument outside its domain."""


__all__ = ["RetailAnalyticsError", "InvalidArgument"]
