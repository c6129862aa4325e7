"""
Base manager class with common functionality for reconciliation runs.

This module provides run identity, summary aggregation and summary logging
shared by run managers.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from ..audit.logger import ReconciliationLogger
from ..audit.summary_writer import SummaryWriter
from ..config.models import GlobalSummary, PairResult, ReconciliationSystemConfig
from ..utils import utc_now


class BaseManager:
    """Base manager class with common functionality for reconciliation runs."""

    def __init__(
        self,
        config: ReconciliationSystemConfig,
        logger: ReconciliationLogger,
        run_id: Optional[str] = None,
    ):
        """
        Initialize the base manager.

        Args:
            config: Run configuration
            logger: Run logger
            run_id: Optional run identifier
        """
        self.config = config
        self.logger = logger
        self.run_id = run_id or str(uuid.uuid4())
        self.summary_writer = SummaryWriter(config.output_folder)

    def log_run_result(self, result: PairResult) -> None:
        """
        Log the outcome of one file pair.

        Args:
            result: PairResult to log
        """
        label = f"{result.file_name_a} vs {result.file_name_b}"
        if result.status == "success":
            self.logger.info(
                f"{label}: matched={result.matched}, only_in_a={result.only_in_a}, "
                f"only_in_b={result.only_in_b}, warnings={len(result.warnings)}, "
                f"errors={len(result.errors)} ({result.processing_time_seconds:.2f}s)"
            )
        else:
            self.logger.error(f"{label}: failed - {'; '.join(result.errors)}")

    def log_run_results(self, results: List[PairResult]) -> None:
        """
        Log multiple PairResult objects.

        Args:
            results: PairResult objects to log
        """
        for result in results:
            self.log_run_result(result)

    def create_summary(
        self,
        start_time: datetime,
        processing_time_seconds: float,
        results: List[PairResult],
        missing_files: Optional[List[str]] = None,
    ) -> GlobalSummary:
        """
        Create a global summary by summing every pair's counters.

        Args:
            start_time: Run start time
            processing_time_seconds: Wall-clock duration of the run
            results: Results of all processed pairs
            missing_files: Files without a counterpart in the other folder
        """
        return GlobalSummary(
            run_id=self.run_id,
            start_time=start_time.isoformat(),
            end_time=utc_now().isoformat(),
            total_processing_time_seconds=processing_time_seconds,
            total_file_pairs=len(results),
            successful_pairs=sum(1 for r in results if r.status == "success"),
            failed_pairs=sum(1 for r in results if r.status == "failed"),
            total_records_in_a=sum(r.total_in_a for r in results),
            total_records_in_b=sum(r.total_in_b for r in results),
            total_matched=sum(r.matched for r in results),
            total_only_in_a=sum(r.only_in_a for r in results),
            total_only_in_b=sum(r.only_in_b for r in results),
            file_results=list(results),
            missing_files=list(missing_files or []),
        )

    def log_run_summary(self, summary: GlobalSummary) -> None:
        """
        Log the totals of a run.

        Args:
            summary: Global summary to log
        """
        self.logger.info("=== Reconciliation Complete ===")
        self.logger.info(
            f"Total Processing Time: {summary.total_processing_time_seconds:.2f}s"
        )
        self.logger.info(
            f"Total File Pairs: {summary.total_file_pairs} "
            f"({summary.successful_pairs} succeeded, {summary.failed_pairs} failed)"
        )
        self.logger.info(f"Total Matched: {summary.total_matched}")
        self.logger.info(f"Total Only in A: {summary.total_only_in_a}")
        self.logger.info(f"Total Only in B: {summary.total_only_in_b}")
        if summary.missing_files:
            self.logger.warning(
                f"Files without a counterpart: {', '.join(summary.missing_files)}"
            )
