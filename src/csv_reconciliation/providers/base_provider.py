"""
Base provider class for file pair operations.

This module provides the bounded worker pool that runs one job per file
pair and isolates the failure of any single pair from the others.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import List, Optional

from ..audit.logger import ReconciliationLogger
from ..config.models import FilePair, PairResult
from ..utils import utc_now


class BaseProvider(ABC):
    """Base provider class with shared functionality for file pair operations."""

    def __init__(
        self,
        logger: ReconciliationLogger,
        run_id: str,
        max_workers: int = 2,
    ):
        """
        Initialize the base provider.

        Args:
            logger: Run logger
            run_id: Unique run identifier
            max_workers: Maximum number of concurrent workers
        """
        self.logger = logger
        self.run_id = run_id
        self.max_workers = max_workers

    @abstractmethod
    def process_pair(self, pair: FilePair) -> PairResult:
        """
        Process a single file pair.
        Must be implemented by subclasses.

        Args:
            pair: File pair to process

        Returns:
            PairResult for the pair
        """

    @abstractmethod
    def get_operation_name(self) -> str:
        """
        Get the name of the operation for logging purposes.
        Must be implemented by subclasses.
        """

    def process_pairs_concurrently(self, pairs: List[FilePair]) -> List[PairResult]:
        """
        Process file pairs concurrently using ThreadPoolExecutor.

        Results are collected in this thread as jobs complete, so workers
        never share mutable state. The order of the returned results is
        completion order and carries no meaning.

        Args:
            pairs: File pairs to process

        Returns:
            One PairResult per pair
        """
        results: List[PairResult] = []
        start_time = utc_now()

        if not pairs:
            self.logger.info(f"No file pairs to process for {self.get_operation_name()}")
            return results

        self.logger.info(
            f"Starting concurrent {self.get_operation_name()} of {len(pairs)} file pairs "
            f"using {self.max_workers} workers",
            extra={"run_id": self.run_id, "operation": self.get_operation_name()},
        )

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix=self.get_operation_name()
        ) as executor:
            future_to_pair = {
                executor.submit(self.process_pair, pair): pair for pair in pairs
            }

            for future in as_completed(future_to_pair):
                pair = future_to_pair[future]
                label = f"{pair.file_name_a} vs {pair.file_name_b}"
                try:
                    result = future.result()

                    if result.status == "success":
                        self.logger.info(f"Completed: {label}")
                    else:
                        self.logger.error(f"Failed to process file pair {label}: {result.errors}")

                except Exception as e:
                    error_msg = f"Processing failed: {str(e)}"
                    self.logger.error(
                        f"Failed to process file pair: {label}: {str(e)}", exc_info=True
                    )
                    result = self._create_failed_result(pair, [error_msg], start_time)

                results.append(result)

        return results

    def _create_failed_result(
        self,
        pair: FilePair,
        errors: List[str],
        start_time: Optional[datetime] = None,
        processing_time_seconds: float = 0.0,
        warnings: Optional[List[str]] = None,
    ) -> PairResult:
        """
        Create an error-only PairResult with zeroed counters.

        Args:
            pair: File pair that failed
            errors: Error messages to report
            start_time: Operation start time
            processing_time_seconds: Elapsed time before the failure
            warnings: Warnings collected before the failure

        Returns:
            PairResult with failed status
        """
        if start_time is None:
            start_time = utc_now()

        return PairResult(
            file_name_a=pair.file_name_a,
            file_name_b=pair.file_name_b,
            status="failed",
            processing_time_seconds=processing_time_seconds,
            start_time=start_time.isoformat(),
            end_time=utc_now().isoformat(),
            warnings=list(warnings or []),
            errors=list(errors),
        )
