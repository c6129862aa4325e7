"""
Reconciliation engine for a single pair of CSV files.

Both files are loaded, indexed by matching key and hash-joined into
matched, only-in-A and only-in-B record sets, which are written to the
pair's output folder together with a result document.
"""

import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..audit.logger import ReconciliationLogger
from ..audit.summary_writer import SummaryWriter
from ..config.models import MatchingConfig, PairResult
from ..core.key_generator import MatchingKeyGenerator
from ..core.record import Record
from ..csv_operations import CsvOperations
from ..exceptions import PairProcessingError
from ..utils import utc_now

MATCHED_FILE = "matched.csv"
ONLY_IN_A_FILE = "only-in-folderA.csv"
ONLY_IN_B_FILE = "only-in-folderB.csv"

MatchedPair = Tuple[Record, Record]


class ReconciliationEngine:
    """Reconciles exactly one pair of CSV files."""

    def __init__(
        self,
        matching_config: MatchingConfig,
        csv_ops: CsvOperations,
        logger: ReconciliationLogger,
        summary_writer: SummaryWriter,
        key_generator: Optional[MatchingKeyGenerator] = None,
    ):
        """
        Initialize the engine.

        Args:
            matching_config: Matching rules for this pair
            csv_ops: CSV loader/writer configured for this pair
            logger: Run logger
            summary_writer: Writer for the pair's result document
            key_generator: Prebuilt key generator for ``matching_config``

        Raises:
            ConfigurationError: If the matching rules name no fields
        """
        self.matching_config = matching_config
        self.csv_ops = csv_ops
        self.logger = logger
        self.summary_writer = summary_writer
        self.key_generator = key_generator or MatchingKeyGenerator(matching_config)

    def reconcile(
        self,
        file_path_a: Union[str, Path],
        file_path_b: Union[str, Path],
        output_folder: Union[str, Path],
    ) -> PairResult:
        """
        Reconcile two CSV files.

        Args:
            file_path_a: File from folder A
            file_path_b: File from folder B
            output_folder: Existing folder receiving this pair's outputs

        Returns:
            PairResult with counts, timing, warnings and record-level errors

        Raises:
            PairProcessingError: If the pair as a whole could not be processed;
                the partial result is attached to the exception
        """
        start = time.perf_counter()
        result = PairResult(
            file_name_a=Path(file_path_a).name,
            file_name_b=Path(file_path_b).name,
            start_time=utc_now().isoformat(),
            output_folder=str(output_folder),
        )
        pair_label = f"{result.file_name_a} vs {result.file_name_b}"

        try:
            self.logger.info(f"Starting reconciliation: {pair_label}")

            table_a = self.csv_ops.read_table(file_path_a)
            table_b = self.csv_ops.read_table(file_path_b)

            result.total_in_a = len(table_a.records)
            result.total_in_b = len(table_b.records)

            self.logger.info(f"Loaded {result.total_in_a} records from {result.file_name_a}")
            self.logger.info(f"Loaded {result.total_in_b} records from {result.file_name_b}")

            records_a_by_key = self._build_record_index(table_a.records, result, "A")
            records_b_by_key = self._build_record_index(table_b.records, result, "B")

            matched, only_in_a, only_in_b = self._classify(records_a_by_key, records_b_by_key)

            result.matched = len(matched)
            result.only_in_a = len(only_in_a)
            result.only_in_b = len(only_in_b)

            self.logger.info(
                f"Reconciliation complete: {pair_label} Matched={result.matched}, "
                f"OnlyInA={result.only_in_a}, OnlyInB={result.only_in_b}"
            )

            self._write_outputs(
                Path(output_folder),
                matched,
                only_in_a,
                only_in_b,
                table_a.columns,
                table_b.columns,
            )

            self._finish(result, start)
            self.summary_writer.write_pair_summary(output_folder, result)
            self.logger.debug(f"Written summary for {pair_label} to {output_folder}")

            return result

        except Exception as e:
            self._finish(result, start)
            result.status = "failed"
            result.errors.append(f"Reconciliation failed: {str(e)}")
            self.logger.error(f"Error reconciling {pair_label}: {str(e)}", exc_info=True)
            raise PairProcessingError(
                f"Failed to reconcile {pair_label}: {str(e)}", result
            ) from e

    def _build_record_index(
        self, records: Sequence[Record], result: PairResult, source: str
    ) -> Dict[str, Record]:
        """
        Index records by matching key, first occurrence wins.

        Records missing a matching field and later duplicates are left out
        with a warning. A failure on one record is logged as an error and
        the record is skipped.
        """
        index: Dict[str, Record] = {}

        for record in records:
            try:
                if not self.key_generator.has_required_fields(record):
                    missing_fields = self.key_generator.get_missing_fields(record)
                    warning = (
                        f"Record at line {record.line_number} in {source} "
                        f"missing fields: {', '.join(missing_fields)}"
                    )
                    result.warnings.append(warning)
                    self.logger.warning(warning)
                    continue

                key = self.key_generator.generate_key(record)

                if key in index:
                    warning = (
                        f"Duplicate key '{key}' found at line {record.line_number} "
                        f"in {source}"
                    )
                    result.warnings.append(warning)
                    self.logger.warning(warning)
                else:
                    index[key] = record

            except Exception as e:
                error = (
                    f"Error processing record at line {record.line_number} "
                    f"in {source}: {str(e)}"
                )
                result.errors.append(error)
                self.logger.error(error)

        return index

    @staticmethod
    def _classify(
        records_a_by_key: Dict[str, Record], records_b_by_key: Dict[str, Record]
    ) -> Tuple[List[MatchedPair], List[Record], List[Record]]:
        """Hash join of the two indexes into matched, only-in-A and only-in-B."""
        matched: List[MatchedPair] = []
        only_in_a: List[Record] = []
        remaining_b = dict(records_b_by_key)

        for key, record_a in records_a_by_key.items():
            record_b = remaining_b.pop(key, None)
            if record_b is not None:
                matched.append((record_a, record_b))
            else:
                only_in_a.append(record_a)

        return matched, only_in_a, list(remaining_b.values())

    def _write_outputs(
        self,
        output_folder: Path,
        matched: List[MatchedPair],
        only_in_a: List[Record],
        only_in_b: List[Record],
        columns_a: List[str],
        columns_b: List[str],
    ) -> None:
        """Write the matched and unmatched record sets."""
        all_columns = self.csv_ops.union_columns(columns_a, columns_b)

        matched_path = output_folder / MATCHED_FILE
        self.csv_ops.write_matched_records(matched_path, matched, columns_a, columns_b)
        self.logger.info(f"Written {len(matched)} matched records to {matched_path}")

        only_in_a_path = output_folder / ONLY_IN_A_FILE
        self.csv_ops.write_records(only_in_a_path, only_in_a, all_columns)
        self.logger.info(f"Written {len(only_in_a)} records to {only_in_a_path}")

        only_in_b_path = output_folder / ONLY_IN_B_FILE
        self.csv_ops.write_records(only_in_b_path, only_in_b, all_columns)
        self.logger.info(f"Written {len(only_in_b)} records to {only_in_b_path}")

    @staticmethod
    def _finish(result: PairResult, start: float) -> None:
        result.processing_time_seconds = time.perf_counter() - start
        result.end_time = utc_now().isoformat()
