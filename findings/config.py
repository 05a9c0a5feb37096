"""
findings/config.py
------------------
Configuration for findings parsing and aggregation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FindingsConfig:
    """Delimiters and ranking limits for the findings aggregator."""

    # Version tracking
    version: str = "1.0.0"

    # Entries inside one accident's findings text
    separator: str = " | "

    # Role markers, matched only at the very end of an entry
    cause_suffix: str = " - C"
    factor_suffix: str = " - F"

    # Hierarchy levels inside one entry (Category-Subcategory-Detail...)
    path_delimiter: str = "-"
    detail_joiner: str = " - "

    # Ranking limits
    max_subcategories: int = 10
    max_findings: int = 500


# Default configuration
FINDINGS_CONFIG = FindingsConfig()
