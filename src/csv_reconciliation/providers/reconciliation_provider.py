"""
Reconciliation provider implementation for the CSV reconciliation system.

This module runs one ReconciliationEngine per file pair. Every job gets
its own engine, key generator, CSV operations helper and output folder.
"""

from ..audit.logger import ReconciliationLogger
from ..audit.summary_writer import SummaryWriter
from ..config.models import CsvConfig, FilePair, PairResult
from ..core.key_generator import MatchingKeyGenerator
from ..csv_operations import CsvOperations
from ..exceptions import PairProcessingError
from ..reconciliation.engine import ReconciliationEngine
from .base_provider import BaseProvider


class ReconciliationProvider(BaseProvider):
    """Provider for reconciliation of file pairs."""

    def __init__(
        self,
        logger: ReconciliationLogger,
        run_id: str,
        csv_config: CsvConfig,
        summary_writer: SummaryWriter,
        max_workers: int = 2,
    ):
        """
        Initialize the reconciliation provider.

        Args:
            logger: Run logger
            run_id: Unique run identifier
            csv_config: CSV settings used to build each job's CsvOperations
            summary_writer: Writer owning the output folder layout
            max_workers: Maximum number of concurrent workers
        """
        super().__init__(logger, run_id, max_workers)
        self.csv_config = csv_config
        self.summary_writer = summary_writer

    def get_operation_name(self) -> str:
        """Get the name of the operation for logging purposes."""
        return "reconciliation"

    def process_pair(self, pair: FilePair) -> PairResult:
        """
        Reconcile a single file pair.

        A PairProcessingError from the engine becomes a failed, error-only
        result carrying the elapsed time and messages collected so far.
        Any other exception propagates to the worker pool.
        """
        label = f"{pair.file_name_a} vs {pair.file_name_b}"
        self.logger.info(
            f"Processing: {label}",
            extra={"run_id": self.run_id, "operation": "reconciliation"},
        )

        pair_folder = self.summary_writer.create_pair_folder(
            pair.file_name_a, pair.file_name_b
        )
        engine = self.create_engine(pair)

        try:
            return engine.reconcile(pair.file_path_a, pair.file_path_b, pair_folder)
        except PairProcessingError as e:
            partial = e.result
            if partial is None:
                return self._create_failed_result(pair, [str(e)])
            failed = self._create_failed_result(
                pair,
                partial.errors,
                processing_time_seconds=partial.processing_time_seconds,
                warnings=partial.warnings,
            )
            failed.start_time = partial.start_time
            failed.output_folder = partial.output_folder
            return failed

    def create_engine(self, pair: FilePair) -> ReconciliationEngine:
        """Build an independent engine for one file pair."""
        return ReconciliationEngine(
            pair.matching_config,
            CsvOperations(self.csv_config),
            self.logger,
            self.summary_writer,
            key_generator=MatchingKeyGenerator(pair.matching_config),
        )
