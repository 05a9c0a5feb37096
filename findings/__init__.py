"""
findings - NTSB findings categorization.

Parses the pipe-delimited ``findings`` field of accident records into
category / subcategory / detail entries and rolls them up into cause and
contributing-factor statistics.

Usage:
    from findings import aggregate_findings

    summary = aggregate_findings(["Aircraft-Powerplant-Engine failure - F"])
    summary.to_dict()
"""

from .aggregator import (
    CategoryRollup,
    FindingRanked,
    FindingsSummary,
    SubcategoryCount,
    aggregate_findings,
)
from .parser import (
    CAUSE,
    FACTOR,
    UNSPECIFIED,
    FindingEntry,
    parse_finding,
    parse_findings,
)

__version__ = "1.0.0"

__all__ = [
    "CAUSE",
    "FACTOR",
    "UNSPECIFIED",
    "CategoryRollup",
    "FindingEntry",
    "FindingRanked",
    "FindingsSummary",
    "SubcategoryCount",
    "aggregate_findings",
    "parse_finding",
    "parse_findings",
]
