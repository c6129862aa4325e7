"""
Exceptions for the CSV reconciliation system.

Configuration and discovery errors are fatal and abort a run before any
file pair is processed. Pair processing errors are isolated to the pair
that raised them.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .config.models import PairResult


class ReconciliationError(Exception):
    """Base class for all reconciliation errors."""


class ConfigurationError(ReconciliationError):
    """Raised when a configuration document or matching rule is invalid."""


class DiscoveryError(ReconciliationError):
    """Raised when a required input folder cannot be found."""


class PairProcessingError(ReconciliationError):
    """
    Raised when a whole file pair cannot be reconciled.

    The partial result (elapsed time, warnings and errors collected so far)
    is attached so the caller can report it.
    """

    def __init__(self, message: str, result: Optional["PairResult"] = None):
        super().__init__(message)
        self.result = result
