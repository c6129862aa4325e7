"""
Providers module for the CSV reconciliation system.

This module provides the worker-pool providers that run one job per
file pair.
"""

from .base_provider import BaseProvider
from .reconciliation_provider import ReconciliationProvider

__all__ = [
    "BaseProvider",
    "ReconciliationProvider",
]
