"""
findings/parser.py
------------------
Tolerant parser for the NTSB ``findings`` text field.

A findings field holds one or more entries joined by " | ". Each entry is a
dash-delimited taxonomy path, optionally followed by a role marker:

    Personnel issues-Task performance-Aircraft control - C
    Aircraft-Powerplant-Engine failure - F
    Environmental issues-Conditions/weather/phenomena-Wind

" - C" marks a cause, " - F" a contributing factor. Entries without a marker
are kept as unspecified findings. Entries with no usable category are
skipped; nothing in this module raises on malformed text.
"""

from dataclasses import dataclass

from .config import FINDINGS_CONFIG, FindingsConfig

# Roles
CAUSE = "Cause"
FACTOR = "Factor"
UNSPECIFIED = "Unspecified"


@dataclass(frozen=True)
class FindingEntry:
    """One parsed entry of a findings field."""
    raw_path: str     # Entry text as stored, role marker included
    role: str         # CAUSE, FACTOR or UNSPECIFIED
    clean_path: str   # raw_path without the role marker
    category: str
    subcategory: str  # "" when the path has a single level
    detail: str       # Remaining levels joined with " - ", "" if none

    @property
    def is_cause(self) -> bool:
        return self.role == CAUSE

    @property
    def is_factor(self) -> bool:
        return self.role == FACTOR


def split_role(segment: str, config: FindingsConfig = FINDINGS_CONFIG) -> tuple[str, str]:
    """
    Strip a trailing role marker from an entry.

    Only an exact " - C" / " - F" at the end of the string counts.

    Returns:
        (role, clean_path) tuple
    """
    if segment.endswith(config.cause_suffix):
        return CAUSE, segment[:-len(config.cause_suffix)]
    if segment.endswith(config.factor_suffix):
        return FACTOR, segment[:-len(config.factor_suffix)]
    return UNSPECIFIED, segment


def parse_finding(segment: str, config: FindingsConfig = FINDINGS_CONFIG) -> FindingEntry | None:
    """
    Parse a single findings entry.

    Args:
        segment: One entry, e.g. "Aircraft-Powerplant-Engine failure - F"
        config: Delimiter configuration

    Returns:
        FindingEntry, or None if no non-empty category can be extracted
    """
    role, clean_path = split_role(segment, config)

    parts = [part.strip() for part in clean_path.split(config.path_delimiter)]
    category = parts[0]
    if not category:
        return None

    subcategory = parts[1] if len(parts) > 1 else ""
    detail = config.detail_joiner.join(parts[2:]) if len(parts) > 2 else ""

    return FindingEntry(
        raw_path=segment,
        role=role,
        clean_path=clean_path,
        category=category,
        subcategory=subcategory,
        detail=detail,
    )


def split_entries(text: str | None, config: FindingsConfig = FINDINGS_CONFIG) -> list[str]:
    """Split a findings field into its non-empty raw entries."""
    if not text:
        return []
    return [segment for segment in text.split(config.separator) if segment]


def parse_findings(text: str | None, config: FindingsConfig = FINDINGS_CONFIG) -> list[FindingEntry]:
    """
    Parse a whole findings field into entries, in stored order.

    None, empty and whitespace-only values produce no entries.
    """
    entries = []
    for segment in split_entries(text, config):
        entry = parse_finding(segment, config)
        if entry is not None:
            entries.append(entry)
    return entries
