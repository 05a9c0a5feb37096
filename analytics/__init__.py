"""
NTSB Explorer Analytics Engine

DuckDB-based analytics layer over the SQLite accidents table.

Usage:
    # Launch interactive SQL shell
    python -m analytics.cli

    # Run a specific query
    python -m analytics.cli --query "SELECT * FROM accidents_by_year"
"""

__version__ = "1.0.0"
