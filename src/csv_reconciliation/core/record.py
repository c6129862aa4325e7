"""
Record model for rows loaded from CSV files.
"""

from typing import Iterable, Iterator, List, Mapping


class Record(Mapping[str, str]):
    """
    A single row of a CSV file.

    Behaves as a read-only mapping from column name to value. Iteration
    follows the column order of the source file, so a record can be
    written back out in its original layout.
    """

    __slots__ = ("_fields", "line_number")

    def __init__(self, fields: Mapping[str, str], line_number: int = 0):
        self._fields = dict(fields)
        self.line_number = line_number

    def __getitem__(self, field: str) -> str:
        return self._fields[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Record(line={self.line_number}, fields={self._fields!r})"

    def get_value(self, field: str) -> str:
        """Value of ``field``, or an empty string when the field is absent."""
        return self._fields.get(field, "")

    def has_field(self, field: str) -> bool:
        """True if ``field`` is present, regardless of its value."""
        return field in self._fields

    def values_for(self, columns: Iterable[str]) -> List[str]:
        """Values laid out in ``columns`` order, blanks for absent columns."""
        return [self.get_value(column) for column in columns]
