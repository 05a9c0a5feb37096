"""
collection/import_accidents.py
------------------------------
Load the NTSB accident JSONL export into the SQLite accidents table.

Each line of the export is one nested accident record:

    {"event_id": "...", "ntsb_number": "...", "event_date": "...",
     "location": {"city", "state", "country", "latitude", "longitude"},
     "aircraft": {"make", "model", "category", "far_part", "damage"},
     "conditions": {"weather", "light"},
     "flight_phase": "...",
     "injuries": {"highest_severity", "fatal", "serious", "minor"},
     "probable_cause": "...", "narrative_preliminary": "...",
     "narrative_factual": "...",
     "contributing_factors": {"findings", "cause_count", "factor_count"}}

Usage:
    from collection.import_accidents import import_accidents
    import_accidents(jsonl_path, db_path)
"""
import json
import logging
import sqlite3
from datetime import date
from pathlib import Path

from sqlite.connection import init_db
from sqlite.queries import insert_accident

logger = logging.getLogger(__name__)

# Log a progress line every N inserted records
PROGRESS_EVERY = 1000

# Only the first N bad lines are logged in full
MAX_LOGGED_ERRORS = 5


def parse_event_date(value: str | None) -> str | None:
    """
    Normalize an NTSB event date to YYYY-MM-DD.

    Accepts "MM/DD/YYYY", "MM/DD/YY" (optionally followed by a time) and
    ISO dates. Two-digit years below 50 are 20xx, the rest 19xx.

    Returns:
        ISO date string, or None if the value can't be parsed
    """
    if not value:
        return None

    head = value.strip().split(" ")[0].split("T")[0]

    try:
        if "/" in head:
            parts = head.split("/")
            if len(parts) != 3:
                return None
            month, day, year = (int(p) for p in parts)
            if year < 100:
                year = 2000 + year if year < 50 else 1900 + year
        else:
            parts = head.split("-")
            if len(parts) != 3:
                return None
            year, month, day = (int(p) for p in parts)
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _text(value) -> str | None:
    """Empty values become NULL; numbers are stored as text."""
    if value is None or value == "":
        return None
    return str(value)


def flatten_record(record: dict) -> dict:
    """
    Flatten one nested accident record into an accidents row.

    Raises:
        KeyError: If the record has no event_id
    """
    if not record.get("event_id"):
        raise KeyError("event_id")

    location = record.get("location") or {}
    aircraft = record.get("aircraft") or {}
    conditions = record.get("conditions") or {}
    injuries = record.get("injuries") or {}
    factors = record.get("contributing_factors") or {}

    return {
        "event_id": str(record["event_id"]),
        "ntsb_number": _text(record.get("ntsb_number")),
        "event_date": _text(record.get("event_date")),
        "event_date_iso": parse_event_date(record.get("event_date")),
        "city": _text(location.get("city")),
        "state": _text(location.get("state")),
        "country": _text(location.get("country")),
        "latitude": _text(location.get("latitude")),
        "longitude": _text(location.get("longitude")),
        "aircraft_make": _text(aircraft.get("make")),
        "aircraft_model": _text(aircraft.get("model")),
        "aircraft_category": _text(aircraft.get("category")),
        "far_part": _text(aircraft.get("far_part")),
        "damage": _text(aircraft.get("damage")),
        "weather": _text(conditions.get("weather")),
        "light_condition": _text(conditions.get("light")),
        "flight_phase": _text(record.get("flight_phase")),
        "highest_severity": _text(injuries.get("highest_severity")),
        "fatal_count": injuries.get("fatal") or 0,
        "serious_count": injuries.get("serious") or 0,
        "minor_count": injuries.get("minor") or 0,
        "probable_cause": _text(record.get("probable_cause")),
        "narrative_preliminary": _text(record.get("narrative_preliminary")),
        "narrative_factual": _text(record.get("narrative_factual")),
        "findings": _text(factors.get("findings")),
        "cause_count": factors.get("cause_count") or 0,
        "factor_count": factors.get("factor_count") or 0,
    }


def import_accidents(
    jsonl_path: Path | str,
    db_path: Path | str,
    limit: int | None = None,
) -> dict:
    """
    Import accident records from a JSONL export.

    Bad lines are counted and skipped; event IDs already in the database
    are left as they are.

    Args:
        jsonl_path: Path to the JSONL export
        db_path: SQLite database path (created if missing)
        limit: Stop after this many inserted records (at least 1)

    Returns:
        Dict with keys: imported, duplicates, errors

    Raises:
        FileNotFoundError: If jsonl_path doesn't exist
        ValueError: If limit is below 1
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    jsonl_path = Path(jsonl_path)
    if not jsonl_path.exists():
        raise FileNotFoundError(f"Accident export not found at {jsonl_path}")

    logger.info(f"Importing accidents from {jsonl_path}")
    stats = {"imported": 0, "duplicates": 0, "errors": 0}

    conn = init_db(db_path)
    try:
        with open(jsonl_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                if not line.strip():
                    continue

                try:
                    row = flatten_record(json.loads(line))
                    inserted = insert_accident(conn, row)
                except (json.JSONDecodeError, KeyError, TypeError, AttributeError, sqlite3.Error) as e:
                    stats["errors"] += 1
                    if stats["errors"] <= MAX_LOGGED_ERRORS:
                        logger.error(f"Line {line_num}: {type(e).__name__}: {e}")
                    continue

                if not inserted:
                    stats["duplicates"] += 1
                    continue

                stats["imported"] += 1
                if stats["imported"] % PROGRESS_EVERY == 0:
                    conn.commit()
                    logger.info(f"Imported {stats['imported']:,} records...")

                if limit is not None and stats["imported"] >= limit:
                    logger.info(f"Reached limit of {limit} records")
                    break

        conn.commit()
    finally:
        conn.close()

    if stats["errors"] > MAX_LOGGED_ERRORS:
        logger.warning(f"{stats['errors'] - MAX_LOGGED_ERRORS} further errors not shown")

    logger.info(
        f"Import complete: {stats['imported']:,} imported, "
        f"{stats['duplicates']:,} duplicates, {stats['errors']:,} errors"
    )
    return stats
