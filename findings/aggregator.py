"""
findings/aggregator.py
----------------------
Roll parsed findings up into category statistics and a ranked finding list.

One pass over every entry of every findings field builds:
- global totals (findings, causes, contributing factors)
- per-category totals with a subcategory frequency table
- occurrence counts per distinct (clean_path, is_cause) pair

All working state lives inside a single call. Rankings are stable: on equal
counts, whatever was seen first stays first.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from .config import FINDINGS_CONFIG, FindingsConfig
from .parser import CAUSE, FACTOR, parse_findings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubcategoryCount:
    """Frequency of one subcategory within its category."""
    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class CategoryRollup:
    """Totals for one top-level finding category."""
    category: str
    total: int
    causes: int
    factors: int
    subcategories: tuple[SubcategoryCount, ...] = ()

    @property
    def unspecified(self) -> int:
        """Entries in this category carrying neither role marker."""
        return self.total - self.causes - self.factors

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "total": self.total,
            "causes": self.causes,
            "factors": self.factors,
            "subcategories": [sub.to_dict() for sub in self.subcategories],
        }


@dataclass(frozen=True)
class FindingRanked:
    """
    A distinct finding path and how often it occurs.

    Unspecified entries are ranked together with factors (is_cause=False).
    """
    full_path: str
    category: str
    subcategory: str
    detail: str
    is_cause: bool
    count: int

    def to_dict(self) -> dict:
        return {
            "fullPath": self.full_path,
            "category": self.category,
            "subcategory": self.subcategory,
            "detail": self.detail,
            "isCause": self.is_cause,
            "count": self.count,
        }


@dataclass(frozen=True)
class FindingsSummary:
    """Result of one aggregation over the findings corpus."""
    total_findings: int = 0
    total_causes: int = 0
    total_factors: int = 0
    categories: tuple[CategoryRollup, ...] = field(default_factory=tuple)
    findings: tuple[FindingRanked, ...] = field(default_factory=tuple)

    @property
    def total_unspecified(self) -> int:
        return self.total_findings - self.total_causes - self.total_factors

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used by the explorer's JSON consumers."""
        return {
            "totalFindings": self.total_findings,
            "totalCauses": self.total_causes,
            "totalFactors": self.total_factors,
            "categories": [cat.to_dict() for cat in self.categories],
            "findings": [finding.to_dict() for finding in self.findings],
        }


def _rank(items, key, limit: int | None = None) -> list:
    """Sort descending by key, keeping first-seen order on ties."""
    ranked = sorted(items, key=key, reverse=True)
    # sorted(reverse=True) is still stable for equal keys
    return ranked if limit is None else ranked[:limit]


def aggregate_findings(
    findings_texts: Iterable[str | None],
    config: FindingsConfig = FINDINGS_CONFIG,
) -> FindingsSummary:
    """
    Aggregate findings fields into category rollups and ranked findings.

    Args:
        findings_texts: Findings fields in record order. None and blank
                        values are tolerated and contribute nothing.
        config: Delimiters and ranking limits

    Returns:
        FindingsSummary; all zeros and empty lists for empty input
    """
    total_findings = 0
    total_causes = 0
    total_factors = 0

    # category -> {"total", "causes", "factors", "subcategories": Counter}
    category_stats: dict[str, dict] = {}
    # (clean_path, is_cause) -> first-seen entry fields + count
    finding_stats: dict[tuple[str, bool], dict] = {}

    n_records = 0
    for text in findings_texts:
        n_records += 1
        for entry in parse_findings(text, config):
            total_findings += 1
            if entry.role == CAUSE:
                total_causes += 1
            elif entry.role == FACTOR:
                total_factors += 1

            stats = category_stats.get(entry.category)
            if stats is None:
                stats = {"total": 0, "causes": 0, "factors": 0, "subcategories": Counter()}
                category_stats[entry.category] = stats
            stats["total"] += 1
            if entry.role == CAUSE:
                stats["causes"] += 1
            elif entry.role == FACTOR:
                stats["factors"] += 1
            if entry.subcategory:
                stats["subcategories"][entry.subcategory] += 1

            key = (entry.clean_path, entry.is_cause)
            ranked = finding_stats.get(key)
            if ranked is None:
                finding_stats[key] = {
                    "full_path": entry.clean_path,
                    "category": entry.category,
                    "subcategory": entry.subcategory,
                    "detail": entry.detail,
                    "is_cause": entry.is_cause,
                    "count": 1,
                }
            else:
                ranked["count"] += 1

    categories = []
    for name, stats in category_stats.items():
        top_subcategories = _rank(
            stats["subcategories"].items(),
            key=lambda item: item[1],
            limit=config.max_subcategories,
        )
        categories.append(CategoryRollup(
            category=name,
            total=stats["total"],
            causes=stats["causes"],
            factors=stats["factors"],
            subcategories=tuple(
                SubcategoryCount(name=sub_name, count=count)
                for sub_name, count in top_subcategories
            ),
        ))

    findings = [
        FindingRanked(**values)
        for values in _rank(
            finding_stats.values(),
            key=lambda values: values["count"],
            limit=config.max_findings,
        )
    ]

    logger.debug(
        f"Aggregated {total_findings:,} findings from {n_records:,} records "
        f"({len(category_stats)} categories, {len(finding_stats):,} distinct paths)"
    )

    return FindingsSummary(
        total_findings=total_findings,
        total_causes=total_causes,
        total_factors=total_factors,
        categories=tuple(_rank(categories, key=lambda cat: cat.total)),
        findings=tuple(findings),
    )
