"""
CSV Reconciliation System.

Reconciles two folders of CSV files by matching records on configurable
key fields, file pair by file pair, with concurrent execution and
per-pair result reporting.
"""

from .config.models import GlobalSummary, MatchingConfig, PairResult, ReconciliationSystemConfig
from .core.key_generator import MatchingKeyGenerator
from .reconciliation.engine import ReconciliationEngine
from .reconciliation.reconciliation_manager import ReconciliationManager

__version__ = "1.0.0"

__all__ = [
    "GlobalSummary",
    "MatchingConfig",
    "MatchingKeyGenerator",
    "PairResult",
    "ReconciliationEngine",
    "ReconciliationManager",
    "ReconciliationSystemConfig",
]
