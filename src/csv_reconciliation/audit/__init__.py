"""
Audit module for the CSV reconciliation system.

This module provides the run logger and the writer for result documents.
"""

from .logger import ReconciliationLogger
from .summary_writer import SummaryWriter

__all__ = ["ReconciliationLogger", "SummaryWriter"]
