#!/usr/bin/env python3
"""
Main entry point for the CSV reconciliation system.

This module provides the command-line interface: it builds the run
configuration from a configuration file and/or flags, sets up the run
logger, runs the reconciliation manager and prints the totals.
"""

import argparse
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .audit.logger import ReconciliationLogger
from .config.loader import ConfigLoader
from .config.models import (
    CsvConfig,
    GlobalSummary,
    LoggingConfig,
    ReconciliationSystemConfig,
    normalise_keys,
)
from .exceptions import ConfigurationError, DiscoveryError
from .reconciliation.reconciliation_manager import ReconciliationManager

LOG_FILE_NAME = "reconciliation.log"

console = Console()
error_console = Console(stderr=True)


def create_logger(config: ReconciliationSystemConfig, run_id: str) -> ReconciliationLogger:
    """Create the run logger from configuration."""
    logger = ReconciliationLogger("csv_reconciliation", run_id)
    logger.setup_logging(config.logging, Path(config.output_folder) / LOG_FILE_NAME)
    return logger


def create_sample_configs(output_dir: Path) -> List[Path]:
    """Write sample matching configuration files into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    single = output_dir / "matching-single-field.json"
    composite = output_dir / "matching-composite-field.json"
    pair_rules = output_dir / "file-pair-rules.json"

    ConfigLoader.create_sample_matching_config(single, composite=False)
    ConfigLoader.create_sample_matching_config(composite, composite=True)
    ConfigLoader.create_sample_pair_matching_config(pair_rules)
    return [single, composite, pair_rules]


def build_config(args: argparse.Namespace) -> ReconciliationSystemConfig:
    """
    Build the run configuration.

    Values from ``--config`` are loaded first and command-line flags
    override them.

    Raises:
        ConfigurationError: If a document is invalid or required values are missing
    """
    document: Dict[str, Any] = {}
    if args.config:
        document = normalise_keys(
            ConfigLoader.load_document(args.config), ReconciliationSystemConfig
        )

    overrides = {
        "folder_a": args.folder_a,
        "folder_b": args.folder_b,
        "output_folder": args.output,
        "comparison_mode": args.mode,
    }
    document.update({key: value for key, value in overrides.items() if value is not None})

    if args.matching_config:
        document["matching_rules"] = ConfigLoader.load_matching_config(args.matching_config)
    if args.file_pair_config:
        document["file_pair_rules"] = ConfigLoader.load_pair_matching_config(
            args.file_pair_config
        )

    csv_settings = normalise_keys(dict(document.get("csv") or {}), CsvConfig)
    if args.delimiter is not None:
        csv_settings["delimiter"] = args.delimiter
    if args.no_header:
        csv_settings["has_header_row"] = False
    if args.pattern is not None:
        csv_settings["file_pattern"] = args.pattern
    document["csv"] = csv_settings

    if args.parallelism is not None:
        document["concurrency"] = {"degree_of_parallelism": args.parallelism}

    logging_settings = normalise_keys(dict(document.get("logging") or {}), LoggingConfig)
    if args.verbose:
        logging_settings["level"] = "DEBUG"
    if args.log_format is not None:
        logging_settings["format"] = args.log_format
    document["logging"] = logging_settings

    if not document.get("folder_a") or not document.get("folder_b"):
        raise ConfigurationError("Both folder A and folder B are required")

    try:
        return ReconciliationSystemConfig.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def print_summary(
    summary: GlobalSummary, config: ReconciliationSystemConfig, log_file: Optional[Path]
) -> None:
    """Print the run totals."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("File pairs processed", str(summary.total_file_pairs))
    table.add_row("Failed file pairs", str(summary.failed_pairs))
    table.add_row("Records in folder A", str(summary.total_records_in_a))
    table.add_row("Records in folder B", str(summary.total_records_in_b))
    table.add_row("Matched", str(summary.total_matched))
    table.add_row("Only in A", str(summary.total_only_in_a))
    table.add_row("Only in B", str(summary.total_only_in_b))
    table.add_row("Files without counterpart", str(len(summary.missing_files)))
    table.add_row("Processing time", f"{summary.total_processing_time_seconds:.2f}s")
    console.print(table)
    console.print(f"Results written to: {config.output_folder}")
    if log_file:
        console.print(f"Log file: {log_file}")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="csv-reconcile",
        description="CSV Reconciliation Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reconcile files with identical names in two folders
  csv-reconcile -a ./FolderA -b ./FolderB -m matching.json -o ./Results

  # Run from a configuration file
  csv-reconcile --config reconciliation.yaml

  # Create sample matching configurations
  csv-reconcile --create-sample-config
        """,
    )

    parser.add_argument("--config", "-c", help="Path to a YAML/JSON run configuration file")
    parser.add_argument("--folder-a", "-a", help="Folder A containing CSV files")
    parser.add_argument("--folder-b", "-b", help="Folder B containing CSV files")
    parser.add_argument(
        "--matching-config", "-m", help="JSON/YAML file with matching rules"
    )
    parser.add_argument(
        "--file-pair-config",
        "-f",
        help="JSON/YAML file with per-file matching rules (alternative to -m)",
    )
    parser.add_argument("--output", "-o", help="Output folder (default: 'Output')")
    parser.add_argument(
        "--parallelism", "-p", type=int, help="Degree of parallelism (default: CPU count)"
    )
    parser.add_argument("--delimiter", "-d", help="CSV delimiter character (default: ',')")
    parser.add_argument(
        "--no-header", action="store_true", help="CSV files don't have header rows"
    )
    parser.add_argument(
        "--mode",
        type=str.lower,
        choices=["byfilename", "alltoall"],
        help="Comparison mode (default: byfilename)",
    )
    parser.add_argument("--pattern", help="Glob pattern for input files (default: *.csv)")
    parser.add_argument(
        "--log-format", choices=["text", "json"], help="Log line format (default: text)"
    )
    parser.add_argument(
        "--create-sample-config",
        nargs="?",
        const=".",
        metavar="DIR",
        help="Create sample configuration files and exit",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate configuration without running reconciliation",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CSV reconciliation tool."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.create_sample_config is not None:
        for path in create_sample_configs(Path(args.create_sample_config)):
            console.print(f"Created: {path}")
        return 0

    try:
        config = build_config(args)
        if args.validate_only:
            console.print("Configuration validation completed successfully")
            return 0

        run_id = str(uuid.uuid4())
        with create_logger(config, run_id) as logger:
            manager = ReconciliationManager(config, logger, run_id)
            summary = manager.run_reconciliation_operations()
            if summary.failed_pairs > 0:
                logger.warning(
                    f"Reconciliation completed with {summary.failed_pairs} failed file pair(s)"
                )
            log_file = logger.log_file_path

        print_summary(summary, config, log_file)
        return 0

    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        return 1
    except DiscoveryError as e:
        error_console.print(f"[red]Discovery error:[/red] {e}")
        return 1
    except Exception as e:
        error_console.print(f"[red]Reconciliation failed:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
