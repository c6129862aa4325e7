"""
Configuration and result models for the CSV reconciliation system using Pydantic.

This module defines the models that validate and parse the YAML/JSON
configuration documents, and the result models produced by a run.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils import base_name, default_parallelism


def _canonical(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


def normalise_keys(data: Dict[str, Any], model: Type[BaseModel]) -> Dict[str, Any]:
    """Rename keys of ``data`` that match a field of ``model`` case-insensitively."""
    known = {_canonical(name): name for name in model.model_fields}
    return {known.get(_canonical(str(key)), key): value for key, value in data.items()}


class CaseInsensitiveModel(BaseModel):
    """
    Base model accepting field names in any case and separator style.

    ``matchingFields``, ``MatchingFields`` and ``matching_fields`` all
    populate the ``matching_fields`` field.
    """

    @model_validator(mode="before")
    @classmethod
    def normalise_field_names(cls, data: Any) -> Any:
        """Map incoming keys onto declared field names."""
        if not isinstance(data, dict):
            return data
        return normalise_keys(data, cls)


class ComparisonMode(str, Enum):
    """Enumeration of supported file pairing strategies."""

    BY_FILE_NAME = "by_file_name"
    ALL_TO_ALL = "all_to_all"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if _canonical(member.value) == _canonical(value):
                    return member
        return None


class MatchingConfig(CaseInsensitiveModel):
    """Configuration for deriving a matching key from a record."""

    matching_fields: List[str] = Field(default_factory=list)
    case_sensitive: bool = False
    trim: bool = True


class PairMatchingConfig(CaseInsensitiveModel):
    """Default matching rules plus per-file overrides keyed by base file name."""

    default_matching_rules: MatchingConfig = Field(default_factory=MatchingConfig)
    file_specific_rules: Dict[str, MatchingConfig] = Field(default_factory=dict)

    def get_matching_config_for_file(self, file_name: str) -> MatchingConfig:
        """
        Get the matching rules for a file.

        Args:
            file_name: File name, with or without extension

        Returns:
            The override registered for the file's base name, or the default rules
        """
        return self.file_specific_rules.get(
            base_name(file_name), self.default_matching_rules
        )


class CsvConfig(CaseInsensitiveModel):
    """Configuration for reading and writing CSV files."""

    delimiter: str = ","
    has_header_row: bool = True
    file_pattern: str = "*.csv"
    encoding: str = "utf-8-sig"

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v):
        """Validate the delimiter is a single character."""
        if len(v) != 1:
            raise ValueError(f"Delimiter must be a single character, got: {v!r}")
        return v


class ConcurrencyConfig(CaseInsensitiveModel):
    """Configuration for concurrency settings."""

    degree_of_parallelism: int = Field(default_factory=default_parallelism, ge=1)


class LoggingConfig(CaseInsensitiveModel):
    """Configuration for logging settings."""

    level: str = Field(default="INFO")
    format: str = Field(default="text")  # "text" or "json"
    log_to_file: bool = Field(default=True)
    log_file_path: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"Invalid logging level: {v}. Must be one of {valid_levels}"
            )
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        """Validate logging format."""
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(
                f"Invalid logging format: {v}. Must be one of {valid_formats}"
            )
        return v.lower()


class ReconciliationSystemConfig(CaseInsensitiveModel):
    """Root configuration model for a reconciliation run."""

    folder_a: Path
    folder_b: Path
    output_folder: Path = Path("Output")
    comparison_mode: ComparisonMode = ComparisonMode.BY_FILE_NAME
    matching_rules: MatchingConfig = Field(default_factory=MatchingConfig)
    file_pair_rules: Optional[PairMatchingConfig] = None
    csv: CsvConfig = Field(default_factory=CsvConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_matching_rules(self):
        """Ensure some matching rules are configured."""
        if self.file_pair_rules is None and not self.matching_rules.matching_fields:
            raise ValueError(
                "Either 'matching_rules' with at least one matching field or "
                "'file_pair_rules' must be provided"
            )
        return self

    def resolve_matching_config(self, file_name_a: str) -> MatchingConfig:
        """
        Resolve the matching rules for a file pair from its A-side file name.

        Per-file overrides are consulted first when file pair rules are
        configured, then their default; otherwise the run's matching rules
        apply.
        """
        if self.file_pair_rules is not None:
            return self.file_pair_rules.get_matching_config_for_file(file_name_a)
        return self.matching_rules


class FilePair(BaseModel):
    """Two CSV files to be reconciled together, with their matching rules."""

    model_config = ConfigDict(frozen=True)

    file_path_a: Path
    file_path_b: Path
    matching_config: MatchingConfig

    @property
    def file_name_a(self) -> str:
        return self.file_path_a.name

    @property
    def file_name_b(self) -> str:
        return self.file_path_b.name


class PairResult(BaseModel):
    """Model for the outcome of reconciling one file pair."""

    file_name_a: str
    file_name_b: str
    status: str = "success"  # success, failed
    total_in_a: int = 0
    total_in_b: int = 0
    matched: int = 0
    only_in_a: int = 0
    only_in_b: int = 0
    processing_time_seconds: float = 0.0
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    output_folder: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class GlobalSummary(BaseModel):
    """Model for the aggregate outcome of a reconciliation run."""

    run_id: str
    start_time: str
    end_time: Optional[str] = None
    total_processing_time_seconds: float = 0.0
    total_file_pairs: int = 0
    successful_pairs: int = 0
    failed_pairs: int = 0
    total_records_in_a: int = 0
    total_records_in_b: int = 0
    total_matched: int = 0
    total_only_in_a: int = 0
    total_only_in_b: int = 0
    file_results: List[PairResult] = Field(default_factory=list)
    missing_files: List[str] = Field(default_factory=list)
