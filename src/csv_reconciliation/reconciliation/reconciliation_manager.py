"""
Reconciliation manager with concurrent execution and comprehensive logging.

This module discovers the file pairs of a run, resolves their matching
rules, reconciles them concurrently and writes the global summary.
"""

import time
from pathlib import Path
from typing import List, Tuple

from ..config.models import ComparisonMode, FilePair, GlobalSummary
from ..core.base_manager import BaseManager
from ..core.key_generator import MatchingKeyGenerator
from ..exceptions import ConfigurationError, DiscoveryError
from ..providers.reconciliation_provider import ReconciliationProvider
from ..utils import utc_now


class ReconciliationManager(BaseManager):
    """Manager for coordinating reconciliation of all file pairs in a run."""

    def run_reconciliation_operations(self) -> GlobalSummary:
        """
        Run reconciliation for every discovered file pair.

        Returns:
            GlobalSummary with aggregated results

        Raises:
            DiscoveryError: If an input folder does not exist
            ConfigurationError: If a pair resolves to matching rules without fields
        """
        start_time = utc_now()
        start = time.perf_counter()

        self.logger.info(f"=== Starting CSV Reconciliation (run_id: {self.run_id}) ===")
        self.logger.info(f"Folder A: {self.config.folder_a}")
        self.logger.info(f"Folder B: {self.config.folder_b}")
        self.logger.info(f"Output Folder: {self.config.output_folder}")
        self.logger.info(f"Comparison Mode: {self.config.comparison_mode.value}")
        self.logger.info(
            f"Degree of Parallelism: {self.config.concurrency.degree_of_parallelism}"
        )

        self.validate_folders()

        pairs, missing_files = self.get_file_pairs()
        self.logger.info(f"Found {len(pairs)} file pair(s) to reconcile")

        if pairs:
            provider = ReconciliationProvider(
                self.logger,
                self.run_id,
                self.config.csv,
                self.summary_writer,
                self.config.concurrency.degree_of_parallelism,
            )
            results = provider.process_pairs_concurrently(pairs)
        else:
            self.logger.warning("No file pairs found to reconcile")
            results = []

        summary = self.create_summary(
            start_time, time.perf_counter() - start, results, missing_files
        )
        summary_path = self.summary_writer.write_global_summary(summary)

        self.log_run_results(results)
        self.log_run_summary(summary)
        self.logger.info(f"Global summary written to {summary_path}")

        return summary

    def validate_folders(self) -> None:
        """
        Ensure both input folders exist.

        Raises:
            DiscoveryError: If either folder is missing
        """
        if not Path(self.config.folder_a).is_dir():
            raise DiscoveryError(f"Folder A not found: {self.config.folder_a}")
        if not Path(self.config.folder_b).is_dir():
            raise DiscoveryError(f"Folder B not found: {self.config.folder_b}")

    def get_file_pairs(self) -> Tuple[List[FilePair], List[str]]:
        """
        Discover the file pairs to reconcile.

        Returns:
            Tuple of the file pairs and the names of files without a
            counterpart (always empty in all-to-all mode)

        Raises:
            ConfigurationError: If a pair resolves to matching rules without fields
        """
        files_a = self._list_files(self.config.folder_a)
        files_b = self._list_files(self.config.folder_b)

        self.logger.info(f"Found {len(files_a)} CSV files in Folder A")
        self.logger.info(f"Found {len(files_b)} CSV files in Folder B")

        if self.config.comparison_mode == ComparisonMode.ALL_TO_ALL:
            path_pairs = [(file_a, file_b) for file_a in files_a for file_b in files_b]
            missing_files: List[str] = []
        else:
            path_pairs, missing_files = self._pair_by_file_name(files_a, files_b)

        return [self._create_pair(file_a, file_b) for file_a, file_b in path_pairs], missing_files

    def _pair_by_file_name(
        self, files_a: List[Path], files_b: List[Path]
    ) -> Tuple[List[Tuple[Path, Path]], List[str]]:
        """Pair files with identical names; report the rest as missing."""
        files_b_by_name = {f.name: f for f in files_b}
        names_a = {f.name for f in files_a}
        path_pairs = []
        missing_files = []

        for file_a in files_a:
            file_b = files_b_by_name.get(file_a.name)
            if file_b is not None:
                path_pairs.append((file_a, file_b))
            else:
                self.logger.warning(f"No matching file in Folder B for: {file_a.name}")
                missing_files.append(file_a.name)

        for file_b in files_b:
            if file_b.name not in names_a:
                self.logger.warning(f"No matching file in Folder A for: {file_b.name}")
                missing_files.append(file_b.name)

        return path_pairs, missing_files

    def _create_pair(self, file_a: Path, file_b: Path) -> FilePair:
        """Build a file pair with its resolved and validated matching rules."""
        matching_config = self.config.resolve_matching_config(file_a.name)
        try:
            MatchingKeyGenerator(matching_config)
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Invalid matching rules for {file_a.name}: {str(e)}"
            ) from e
        return FilePair(file_path_a=file_a, file_path_b=file_b, matching_config=matching_config)

    def _list_files(self, folder: Path) -> List[Path]:
        return sorted(
            path
            for path in Path(folder).glob(self.config.csv.file_pattern)
            if path.is_file()
        )
