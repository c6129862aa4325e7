"""
Summary writer for reconciliation results.

This module persists per-pair and global result documents as JSON and
owns the layout of the output folder.
"""

from pathlib import Path
from typing import Union

from pydantic import BaseModel

from ..config.models import GlobalSummary, PairResult
from ..utils import pair_folder_name

PAIR_SUMMARY_FILE = "reconcile-summary.json"
GLOBAL_SUMMARY_FILE = "global-summary.json"


class SummaryWriter:
    """Writes result documents below a run's output folder."""

    def __init__(self, output_folder: Union[str, Path]):
        """
        Initialize the summary writer, creating the output folder.

        Args:
            output_folder: Root folder for all run outputs
        """
        self.output_folder = Path(output_folder)
        self.output_folder.mkdir(parents=True, exist_ok=True)

    def create_pair_folder(self, file_name_a: str, file_name_b: str) -> Path:
        """Create and return the output subfolder for a file pair."""
        folder = self.output_folder / pair_folder_name(file_name_a, file_name_b)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    def write_pair_summary(self, pair_folder: Union[str, Path], result: PairResult) -> Path:
        """Write a pair's result into its output folder."""
        return self._write(Path(pair_folder) / PAIR_SUMMARY_FILE, result)

    def write_global_summary(self, summary: GlobalSummary) -> Path:
        """Write the run summary into the output folder root."""
        return self._write(self.output_folder / GLOBAL_SUMMARY_FILE, summary)

    @staticmethod
    def _write(path: Path, model: BaseModel) -> Path:
        path.write_text(model.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return path
