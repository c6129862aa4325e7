"""
Configuration module for the CSV reconciliation system.
"""

from .loader import ConfigLoader
from .models import (
    ComparisonMode,
    ConcurrencyConfig,
    CsvConfig,
    LoggingConfig,
    MatchingConfig,
    PairMatchingConfig,
    ReconciliationSystemConfig,
)

__all__ = [
    "ComparisonMode",
    "ConcurrencyConfig",
    "ConfigLoader",
    "CsvConfig",
    "LoggingConfig",
    "MatchingConfig",
    "PairMatchingConfig",
    "ReconciliationSystemConfig",
]
