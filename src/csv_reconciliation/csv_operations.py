"""
CSV operations utility for reading and writing record collections.

This module provides the loader and writer used by the reconciliation
engine. Parsing is delegated to the standard library ``csv`` module.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple, Union

from .config.models import CsvConfig
from .core.record import Record

MATCHED_PREFIX_A = "A_"
MATCHED_PREFIX_B = "B_"


class CsvTable(NamedTuple):
    """Columns and records loaded from one CSV file."""

    columns: List[str]
    records: List[Record]


class CsvOperations:
    """Utility class for CSV file operations."""

    def __init__(self, csv_config: CsvConfig = None):
        """
        Initialize CSV operations.

        Args:
            csv_config: Delimiter, header and encoding settings
        """
        self.csv_config = csv_config or CsvConfig()

    def read_table(self, file_path: Union[str, Path]) -> CsvTable:
        """
        Read all records of a CSV file.

        With a header row, columns come from the header and line numbers
        start at 2. Every header column is set on every record; a row shorter
        than the header gets empty values for its trailing columns, and when a
        column name repeats, the first occurrence supplies the value. Without
        a header, columns are named ``Column0``, ``Column1``, ... and line
        numbers start at 1. Blank lines are skipped.

        Args:
            file_path: CSV file to read

        Returns:
            CsvTable with the column names and the records in file order
        """
        with open(
            file_path, "r", encoding=self.csv_config.encoding, newline=""
        ) as f:
            rows = [row for row in csv.reader(f, delimiter=self.csv_config.delimiter) if row]

        if self.csv_config.has_header_row:
            if not rows:
                return CsvTable([], [])
            columns = rows[0]
            records = [
                Record(self._row_fields(columns, row), line_number=index)
                for index, row in enumerate(rows[1:], start=2)
            ]
            return CsvTable(list(columns), records)

        width = max((len(row) for row in rows), default=0)
        columns = [f"Column{i}" for i in range(width)]
        records = [
            Record(self._row_fields(columns, row), line_number=index)
            for index, row in enumerate(rows, start=1)
        ]
        return CsvTable(columns, records)

    @staticmethod
    def _row_fields(columns: Sequence[str], row: Sequence[str]) -> Dict[str, str]:
        fields: Dict[str, str] = {}
        for index, column in enumerate(columns):
            if column not in fields:
                fields[column] = row[index] if index < len(row) else ""
        return fields

    def write_records(
        self,
        file_path: Union[str, Path],
        records: Sequence[Record],
        columns: Sequence[str],
    ) -> None:
        """
        Write records using the given column order.

        An empty record set produces an empty file.
        """
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            if not records:
                return
            writer = csv.writer(f, delimiter=self.csv_config.delimiter)
            writer.writerow(columns)
            for record in records:
                writer.writerow(record.values_for(columns))

    def write_matched_records(
        self,
        file_path: Union[str, Path],
        matched_pairs: Sequence[Tuple[Record, Record]],
        columns_a: Sequence[str],
        columns_b: Sequence[str],
    ) -> None:
        """
        Write matched record pairs side by side.

        Columns from A are prefixed with ``A_`` and columns from B with
        ``B_``. An empty set produces an empty file.
        """
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            if not matched_pairs:
                return
            writer = csv.writer(f, delimiter=self.csv_config.delimiter)
            writer.writerow(
                [f"{MATCHED_PREFIX_A}{c}" for c in columns_a]
                + [f"{MATCHED_PREFIX_B}{c}" for c in columns_b]
            )
            for record_a, record_b in matched_pairs:
                writer.writerow(record_a.values_for(columns_a) + record_b.values_for(columns_b))

    @staticmethod
    def union_columns(columns_a: Iterable[str], columns_b: Iterable[str]) -> List[str]:
        """Columns of A followed by the columns of B not already present."""
        union = list(dict.fromkeys(columns_a))
        seen = set(union)
        for column in columns_b:
            if column not in seen:
                union.append(column)
                seen.add(column)
        return union
