"""
CLI module entry point.

This allows the CLI to be run as:
python -m csv_reconciliation
"""

from csv_reconciliation.main import main

if __name__ == "__main__":
    exit(main())
