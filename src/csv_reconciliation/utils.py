"""
Small helpers shared across the reconciliation system.
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def base_name(file_name: PathLike) -> str:
    """File name without directory and without its final extension."""
    return Path(file_name).stem


def pair_folder_name(file_name_a: PathLike, file_name_b: PathLike) -> str:
    """Name of the output subfolder for a file pair, e.g. ``orders_vs_orders``."""
    return f"{base_name(file_name_a)}_vs_{base_name(file_name_b)}"


def default_parallelism() -> int:
    """Number of available processors, never less than one."""
    return os.cpu_count() or 1
