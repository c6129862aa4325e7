"""
Configuration loader for the CSV reconciliation system.

Documents are parsed with PyYAML. JSON is a subset of YAML, so the same
loader accepts ``.json`` and ``.yaml`` files.
"""

import json
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigurationError
from .models import MatchingConfig, PairMatchingConfig, ReconciliationSystemConfig

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigLoader:
    """Loads and validates configuration documents."""

    @staticmethod
    def load_from_file(config_path: Union[str, Path]) -> ReconciliationSystemConfig:
        """
        Load the run configuration.

        Args:
            config_path: Path to a YAML or JSON configuration file

        Returns:
            Validated ReconciliationSystemConfig

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        return ConfigLoader._load_model(config_path, ReconciliationSystemConfig)

    @staticmethod
    def load_matching_config(config_path: Union[str, Path]) -> MatchingConfig:
        """Load a single set of matching rules."""
        return ConfigLoader._load_model(config_path, MatchingConfig)

    @staticmethod
    def load_pair_matching_config(config_path: Union[str, Path]) -> PairMatchingConfig:
        """Load default matching rules with per-file overrides."""
        return ConfigLoader._load_model(config_path, PairMatchingConfig)

    @staticmethod
    def load_document(config_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a configuration document into a dictionary.

        Raises:
            ConfigurationError: If the file is missing, unparsable or not a mapping
        """
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed configuration file {path}: {e}") from e

        if not isinstance(document, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping at the top level"
            )
        return document

    @staticmethod
    def _load_model(config_path: Union[str, Path], model: Type[ModelT]) -> ModelT:
        document = ConfigLoader.load_document(config_path)
        try:
            return model.model_validate(document)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}"
            ) from e

    @staticmethod
    def create_sample_matching_config(
        output_path: Union[str, Path], composite: bool = False
    ) -> None:
        """
        Write a sample matching configuration.

        Args:
            output_path: Destination file
            composite: Write a two-field composite key instead of a single field
        """
        if composite:
            config = MatchingConfig(
                matching_fields=["FirstName", "LastName"], case_sensitive=False, trim=True
            )
        else:
            config = MatchingConfig(
                matching_fields=["InvoiceId"], case_sensitive=False, trim=True
            )
        ConfigLoader._write_json(output_path, config.model_dump())

    @staticmethod
    def create_sample_pair_matching_config(output_path: Union[str, Path]) -> None:
        """Write a sample per-file matching configuration."""
        config = PairMatchingConfig(
            default_matching_rules=MatchingConfig(matching_fields=["Id"]),
            file_specific_rules={
                "customers": MatchingConfig(matching_fields=["FirstName", "LastName"]),
                "invoices": MatchingConfig(
                    matching_fields=["InvoiceId"], case_sensitive=True
                ),
            },
        )
        ConfigLoader._write_json(output_path, config.model_dump())

    @staticmethod
    def _write_json(output_path: Union[str, Path], data: Dict[str, Any]) -> None:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
