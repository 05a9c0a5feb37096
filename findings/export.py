"""
findings/export.py
------------------
Presentation and export helpers for aggregated findings.

Covers what the explorer's causes view does with an aggregation result:
- filter ranked findings by category and free-text search
- one-line copy text for a finding
- category share of all findings
- JSON export (summary + ranked findings) and CSV export
- labels for the per-accident findings list
"""

import json
import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from .aggregator import CategoryRollup, FindingRanked, FindingsSummary
from .config import FINDINGS_CONFIG, FindingsConfig
from .parser import CAUSE, FACTOR, FindingEntry

logger = logging.getLogger(__name__)

# Column order for CSV exports
CSV_COLUMNS = ["fullPath", "category", "subcategory", "detail", "isCause", "count"]

ENTRY_LABELS = {
    CAUSE: "CAUSE",
    FACTOR: "FACTOR",
}


def filter_findings(
    findings: Iterable[FindingRanked],
    category: str | None = None,
    search_term: str | None = None,
) -> list[FindingRanked]:
    """
    Narrow ranked findings to one category and/or a search term.

    The search term is matched case-insensitively against the full path,
    the category and the subcategory. Ranking order is preserved.
    """
    results = list(findings)

    if category:
        results = [f for f in results if f.category == category]

    if search_term:
        term = search_term.lower()
        results = [
            f for f in results
            if term in f.full_path.lower()
            or term in f.category.lower()
            or term in f.subcategory.lower()
        ]

    return results


def format_finding_line(finding: FindingRanked) -> str:
    """Copy text for a ranked finding, e.g. "A-B-C (Cause) - 12 occurrences"."""
    role = "Cause" if finding.is_cause else "Factor"
    return f"{finding.full_path} ({role}) - {finding.count} occurrences"


def category_share(category: CategoryRollup, summary: FindingsSummary) -> float:
    """Percentage of all findings that fall in a category (0.0 when empty)."""
    if summary.total_findings <= 0:
        return 0.0
    return category.total / summary.total_findings * 100


def describe_entry(entry: FindingEntry, config: FindingsConfig = FINDINGS_CONFIG) -> dict:
    """
    Display fields for one entry of a single accident's findings list.

    Returns:
        Dict with keys:
        - label: "CAUSE", "FACTOR" or "FINDING"
        - headline: first path level
        - trail: remaining levels joined with arrows ("" for single-level paths)
    """
    parts = [part.strip() for part in entry.clean_path.split(config.path_delimiter)]
    return {
        "label": ENTRY_LABELS.get(entry.role, "FINDING"),
        "headline": parts[0],
        "trail": " → ".join(parts[1:]),
    }


def build_export(summary: FindingsSummary) -> dict:
    """Build the category-summary export document."""
    data = summary.to_dict()
    return {
        "summary": {
            "totalFindings": data["totalFindings"],
            "totalCauses": data["totalCauses"],
            "totalFactors": data["totalFactors"],
            "categories": data["categories"],
        },
        "findings": data["findings"],
    }


def write_export_json(summary: FindingsSummary, output_path: Path | str) -> Path:
    """Write the category-summary export as indented JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(build_export(summary), f, indent=2)

    logger.info(f"Exported {len(summary.categories)} categories, "
                f"{len(summary.findings)} findings to {output_path}")
    return output_path


def findings_to_dataframe(findings: Iterable[FindingRanked]) -> pd.DataFrame:
    """Ranked findings as a DataFrame with the export column names."""
    rows = [finding.to_dict() for finding in findings]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def write_findings_csv(findings: Iterable[FindingRanked], output_path: Path | str) -> Path:
    """Write ranked findings to CSV, one row per distinct finding."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = findings_to_dataframe(findings)
    df.to_csv(output_path, index=False)

    logger.info(f"Exported {len(df):,} findings to {output_path}")
    return output_path
