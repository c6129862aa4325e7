"""
setup.py configuration script for csv_reconciliation project.

A CSV reconciliation system that matches records between two folders of
CSV files on configurable key fields, with concurrent per-pair processing
and machine-readable result reporting.
"""

import datetime
import re
from pathlib import Path

from setuptools import find_packages, setup

# Read the version without importing the package and its dependencies
version = re.search(
    r'^__version__ = "([^"]+)"',
    Path("src/csv_reconciliation/__init__.py").read_text(encoding="utf-8"),
    re.MULTILINE,
).group(1)

local_version = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%d.%H%M%S")

setup(
    name="csv_reconciliation",
    version=version + "+" + local_version,
    description="Concurrent key-based reconciliation of CSV file collections",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="./src"),
    package_dir={"": "src"},
    entry_points={
        "console_scripts": [
            "csv-reconcile=csv_reconciliation.main:main",
        ],
    },
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "structlog>=22.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "coverage>=7.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "coverage>=7.0.0",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
