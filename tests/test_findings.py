"""
tests/test_findings.py
----------------------
Unit tests for findings parsing and aggregation:
- Role marker detection (" - C" / " - F" at end of entry)
- Category / subcategory / detail extraction
- Tolerance of blank and malformed entries
- Category rollups, ranked findings, stable tie-breaks and truncation

Run with: python -m pytest tests/test_findings.py -v
"""

import pytest
from findings import (
    CAUSE,
    FACTOR,
    UNSPECIFIED,
    aggregate_findings,
    parse_finding,
    parse_findings,
)
from findings.config import FINDINGS_CONFIG, FindingsConfig
from findings.parser import split_role


SCENARIO = [
    "Personnel issues-Task performance-Aircraft control - C",
    "Personnel issues-Task performance-Aircraft control - C",
    "Aircraft-Powerplant-Engine failure - F",
]


class TestSplitRole:
    """Tests for role marker stripping."""

    def test_cause_suffix(self):
        """Trailing ' - C' marks a cause."""
        assert split_role("A-B - C") == (CAUSE, "A-B")

    def test_factor_suffix(self):
        """Trailing ' - F' marks a contributing factor."""
        assert split_role("A-B - F") == (FACTOR, "A-B")

    def test_no_suffix(self):
        """Entries without a marker are unspecified and unchanged."""
        assert split_role("A-B") == (UNSPECIFIED, "A-B")

    def test_suffix_must_be_at_end(self):
        """A marker in the middle of the entry doesn't count."""
        assert split_role("A - C-B") == (UNSPECIFIED, "A - C-B")

    def test_lowercase_marker_ignored(self):
        """Markers are case sensitive."""
        assert split_role("A-B - c") == (UNSPECIFIED, "A-B - c")

    def test_marker_needs_leading_space(self):
        """'-C' without the spaced dash is not a marker."""
        assert split_role("A-B-C") == (UNSPECIFIED, "A-B-C")

    def test_trailing_newline_is_not_a_marker(self):
        """Anchoring is exact: a trailing newline defeats the marker."""
        assert split_role("A-B - C\n")[0] == UNSPECIFIED


class TestParseFinding:
    """Tests for single-entry parsing."""

    def test_three_level_cause(self):
        """'A-B-C - C' -> category A, subcategory B, detail C, cause."""
        entry = parse_finding("A-B-C - C")
        assert entry.category == "A"
        assert entry.subcategory == "B"
        assert entry.detail == "C"
        assert entry.role == CAUSE
        assert entry.is_cause is True
        assert entry.clean_path == "A-B-C"
        assert entry.raw_path == "A-B-C - C"

    def test_single_level_factor(self):
        """'A - F' -> category A only, factor."""
        entry = parse_finding("A - F")
        assert entry.category == "A"
        assert entry.subcategory == ""
        assert entry.detail == ""
        assert entry.role == FACTOR
        assert entry.is_factor is True

    def test_deep_path_detail_joined(self):
        """Levels past the subcategory are joined with ' - '."""
        entry = parse_finding("Aircraft-Fuel system-Fuel tank-Contamination - C")
        assert entry.category == "Aircraft"
        assert entry.subcategory == "Fuel system"
        assert entry.detail == "Fuel tank - Contamination"

    def test_parts_are_trimmed(self):
        """Whitespace around each level is removed."""
        entry = parse_finding("  Environmental issues - Conditions/weather -  Wind ")
        assert entry.category == "Environmental issues"
        assert entry.subcategory == "Conditions/weather"
        assert entry.detail == "Wind"
        assert entry.role == UNSPECIFIED

    def test_clean_path_is_not_trimmed(self):
        """The full path keeps the stored text apart from the marker."""
        entry = parse_finding(" A-B - C")
        assert entry.clean_path == " A-B"

    def test_empty_category_skipped(self):
        """Entries whose first level is empty return None."""
        assert parse_finding("-B-C - C") is None
        assert parse_finding(" - C") is None
        assert parse_finding("   ") is None


class TestParseFindings:
    """Tests for whole-field parsing."""

    def test_multiple_entries(self):
        """Entries are split on ' | ' in stored order."""
        entries = parse_findings("A-B - C | X-Y-Z - F | Q")
        assert [e.category for e in entries] == ["A", "X", "Q"]
        assert [e.role for e in entries] == [CAUSE, FACTOR, UNSPECIFIED]

    @pytest.mark.parametrize("text", [None, "", "   ", "\t"])
    def test_blank_fields_produce_nothing(self, text):
        """None, empty and whitespace-only fields yield no entries."""
        assert parse_findings(text) == []

    def test_empty_segments_dropped(self):
        """Adjacent separators don't create entries."""
        entries = parse_findings("A-B - C |  | X")
        assert [e.category for e in entries] == ["A", "X"]

    def test_malformed_segments_skipped(self):
        """Entries without a category are skipped, the rest survive."""
        entries = parse_findings("-B - C | A-B - F")
        assert len(entries) == 1
        assert entries[0].category == "A"

    def test_pipe_without_spaces_not_a_separator(self):
        """Only the spaced ' | ' separates entries."""
        entries = parse_findings("A|B - C")
        assert len(entries) == 1
        assert entries[0].category == "A|B"


class TestAggregateScenario:
    """The documented three-record scenario."""

    def test_totals(self):
        summary = aggregate_findings(SCENARIO)
        assert summary.total_findings == 3
        assert summary.total_causes == 2
        assert summary.total_factors == 1

    def test_to_dict(self):
        """Serialized shape matches the explorer's JSON contract."""
        result = aggregate_findings(SCENARIO).to_dict()
        assert result == {
            "totalFindings": 3,
            "totalCauses": 2,
            "totalFactors": 1,
            "categories": [
                {
                    "category": "Personnel issues",
                    "total": 2,
                    "causes": 2,
                    "factors": 0,
                    "subcategories": [{"name": "Task performance", "count": 2}],
                },
                {
                    "category": "Aircraft",
                    "total": 1,
                    "causes": 0,
                    "factors": 1,
                    "subcategories": [{"name": "Powerplant", "count": 1}],
                },
            ],
            "findings": [
                {
                    "fullPath": "Personnel issues-Task performance-Aircraft control",
                    "category": "Personnel issues",
                    "subcategory": "Task performance",
                    "detail": "Aircraft control",
                    "isCause": True,
                    "count": 2,
                },
                {
                    "fullPath": "Aircraft-Powerplant-Engine failure",
                    "category": "Aircraft",
                    "subcategory": "Powerplant",
                    "detail": "Engine failure",
                    "isCause": False,
                    "count": 1,
                },
            ],
        }

    def test_empty_input(self):
        """No records -> all zeros and empty lists."""
        assert aggregate_findings([]).to_dict() == {
            "totalFindings": 0,
            "totalCauses": 0,
            "totalFactors": 0,
            "categories": [],
            "findings": [],
        }

    def test_blank_records_contribute_nothing(self):
        summary = aggregate_findings([None, "", "   "])
        assert summary.total_findings == 0
        assert summary.categories == ()
        assert summary.findings == ()

    def test_accepts_generator(self):
        """Input only needs to be iterable once."""
        summary = aggregate_findings(text for text in SCENARIO)
        assert summary.total_findings == 3


class TestAggregateInvariants:
    """Sum laws, role handling and determinism."""

    MIXED = [
        "A-B - C | A-B - F | A-B",
        "A-C-D - C | E - F",
        "E-F-G | -bad - C",
        None,
        "A-B - C",
    ]

    def test_category_sum_law(self):
        """total == causes + factors + unspecified for every category."""
        summary = aggregate_findings(self.MIXED)
        for cat in summary.categories:
            assert cat.total == cat.causes + cat.factors + cat.unspecified
            assert cat.unspecified >= 0

    def test_global_sum_law(self):
        summary = aggregate_findings(self.MIXED)
        assert summary.total_causes + summary.total_factors <= summary.total_findings
        assert summary.total_unspecified == 2
        assert sum(cat.total for cat in summary.categories) == summary.total_findings

    def test_equality_without_unspecified(self):
        summary = aggregate_findings(SCENARIO)
        assert summary.total_causes + summary.total_factors == summary.total_findings

    def test_unspecified_counts_toward_total_only(self):
        summary = aggregate_findings(["A-B"])
        assert summary.total_findings == 1
        assert summary.total_causes == 0
        assert summary.total_factors == 0
        assert summary.categories[0].unspecified == 1

    def test_unspecified_ranked_with_factors(self):
        """Unspecified entries share the is_cause=False bucket."""
        summary = aggregate_findings(["A-B", "A-B - F", "A-B - C"])
        ranked = [(f.full_path, f.is_cause, f.count) for f in summary.findings]
        assert ranked == [("A-B", False, 2), ("A-B", True, 1)]

    def test_cause_and_factor_ranked_separately(self):
        """Same path as cause and as factor are distinct findings."""
        summary = aggregate_findings(["X-Y - C", "X-Y - F"])
        assert len(summary.findings) == 2
        assert {f.is_cause for f in summary.findings} == {True, False}

    def test_subcategory_only_when_present(self):
        summary = aggregate_findings(["A - C", "A - F"])
        assert summary.categories[0].total == 2
        assert summary.categories[0].subcategories == ()

    def test_idempotent(self):
        """Same input twice -> identical output, order included."""
        first = aggregate_findings(self.MIXED)
        second = aggregate_findings(self.MIXED)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_record_order_only_affects_ties(self):
        """Reordering records keeps every count; only tie order may move."""
        forward = aggregate_findings(self.MIXED)
        backward = aggregate_findings(list(reversed(self.MIXED)))

        def rollups(summary):
            return {c.category: (c.total, c.causes, c.factors) for c in summary.categories}

        def finding_counts(summary):
            return {(f.full_path, f.is_cause): f.count for f in summary.findings}

        assert rollups(forward) == rollups(backward)
        assert finding_counts(forward) == finding_counts(backward)
        assert (forward.total_findings, forward.total_causes, forward.total_factors) == (
            backward.total_findings, backward.total_causes, backward.total_factors
        )

    def test_malformed_entry_not_counted(self):
        summary = aggregate_findings(["-bad - C"])
        assert summary.total_findings == 0
        assert summary.total_causes == 0


class TestAggregateRanking:
    """Ordering, tie-breaks and truncation."""

    def test_categories_sorted_by_total(self):
        summary = aggregate_findings(["X - C", "Y - C", "Y - F"])
        assert [c.category for c in summary.categories] == ["Y", "X"]

    def test_category_ties_keep_first_seen(self):
        summary = aggregate_findings(["X - C", "Y - C", "Z - F"])
        assert [c.category for c in summary.categories] == ["X", "Y", "Z"]

    def test_findings_ties_keep_first_seen(self):
        summary = aggregate_findings(["P2 - C", "P1 - C", "P3 - F", "P3 - F"])
        assert [f.full_path for f in summary.findings] == ["P3", "P2", "P1"]

    def test_subcategories_truncated_to_ten(self):
        texts = [f"A-S{i} - C" for i in range(12)] + ["A-S11 - C"]
        summary = aggregate_findings(texts)
        subs = summary.categories[0].subcategories
        assert len(subs) == FINDINGS_CONFIG.max_subcategories == 10
        assert subs[0].name == "S11"
        assert subs[0].count == 2
        assert [s.name for s in subs[1:]] == [f"S{i}" for i in range(9)]

    def test_subcategories_fewer_than_limit(self):
        summary = aggregate_findings(["A-S1 - C", "A-S2 - F", "A-S1 - F"])
        subs = summary.categories[0].subcategories
        assert [(s.name, s.count) for s in subs] == [("S1", 2), ("S2", 1)]

    def test_findings_truncated_to_500(self):
        text = " | ".join(f"Cat-Path {i} - C" for i in range(600))
        summary = aggregate_findings([text])
        assert summary.total_findings == 600
        assert len(summary.findings) == FINDINGS_CONFIG.max_findings == 500
        assert summary.findings[0].full_path == "Cat-Path 0"
        assert summary.findings[-1].full_path == "Cat-Path 499"

    def test_findings_fewer_than_limit(self):
        summary = aggregate_findings(SCENARIO)
        assert len(summary.findings) == 2

    def test_custom_limits(self):
        config = FindingsConfig(max_subcategories=1, max_findings=1)
        summary = aggregate_findings(["A-B - C", "A-C - C", "A-C - C"], config)
        assert [s.name for s in summary.categories[0].subcategories] == ["C"]
        assert [f.full_path for f in summary.findings] == ["A-C"]

    def test_first_occurrence_fields_recorded(self):
        summary = aggregate_findings(["Aircraft-Fuel system-Fuel tank-Contamination - C"])
        finding = summary.findings[0]
        assert finding.category == "Aircraft"
        assert finding.subcategory == "Fuel system"
        assert finding.detail == "Fuel tank - Contamination"
        assert finding.full_path == "Aircraft-Fuel system-Fuel tank-Contamination"
