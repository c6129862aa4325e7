from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Dict, List, Sequence

import pytest

from csv_reconciliation.audit.logger import ReconciliationLogger
from csv_reconciliation.audit.summary_writer import SummaryWriter
from csv_reconciliation.config.models import LoggingConfig, MatchingConfig
from csv_reconciliation.core.record import Record


def write_csv(path: Path, rows: Sequence[Sequence[str]], delimiter: str = ",") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerows(rows)
    return path


def read_csv(path: Path) -> List[List[str]]:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def make_record(fields: Dict[str, str], line_number: int = 2) -> Record:
    return Record(fields, line_number=line_number)


def matching(*fields: str, case_sensitive: bool = False, trim: bool = True) -> MatchingConfig:
    return MatchingConfig(matching_fields=list(fields), case_sensitive=case_sensitive, trim=trim)


@pytest.fixture
def logger() -> ReconciliationLogger:
    log = ReconciliationLogger("tests")
    log.setup_logging(LoggingConfig(level="DEBUG", log_to_file=False), console=False)
    yield log
    log.close()


@pytest.fixture
def summary_writer(tmp_path: Path) -> SummaryWriter:
    return SummaryWriter(tmp_path / "out")


@pytest.fixture
def csv_writer(tmp_path: Path) -> Callable[..., Path]:
    def _write(relative: str, rows: Sequence[Sequence[str]], delimiter: str = ",") -> Path:
        return write_csv(tmp_path / relative, rows, delimiter)

    return _write
