"""
Utilities package for Retail Sales Analytics.

Exports shared helpers for logging and profiling. Keep this package free of
domain-specific logic.
"""

from retail_analytics.utils.logging import configure_logging, get_logger
from retail_analytics.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
