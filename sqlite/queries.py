"""
sqlite/queries.py
-----------------
CRUD operations for the NTSB Explorer database.
"""
import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime

from .schema import ACCIDENT_COLUMNS

# Severity codes used by NTSB for the highest injury level of an event
SEVERITY_FATAL = "FATL"
SEVERITY_SERIOUS = "SERS"
SEVERITY_MINOR = "MINR"
SEVERITY_NONE = "NONE"

# Columns searched by the free-text filter
SEARCH_COLUMNS = [
    "ntsb_number",
    "event_id",
    "probable_cause",
    "city",
    "aircraft_make",
    "aircraft_model",
]

MAX_SEARCH_LIMIT = 100
DEFAULT_SEARCH_LIMIT = 24
MAX_FILTER_MAKES = 200


# --- Accidents table ---

def insert_accident(conn: sqlite3.Connection, accident: dict) -> bool:
    """
    Insert one flattened accident row. Existing event IDs are left untouched.

    Args:
        conn: Database connection
        accident: Dict keyed by ACCIDENT_COLUMNS (event_id required)

    Returns:
        True if a new row was inserted, False if the event already existed
    """
    placeholders = ", ".join("?" for _ in ACCIDENT_COLUMNS)
    cursor = conn.execute(
        f"""
        INSERT INTO accidents ({", ".join(ACCIDENT_COLUMNS)}, created_at)
        VALUES ({placeholders}, ?)
        ON CONFLICT(event_id) DO NOTHING
        """,
        (
            *(accident.get(column) for column in ACCIDENT_COLUMNS),
            datetime.now().isoformat(),
        )
    )
    return cursor.rowcount > 0


def get_accident_by_id(conn: sqlite3.Connection, accident_id: int) -> dict | None:
    """Get a single accident row by primary key, or None."""
    cursor = conn.execute(
        "SELECT * FROM accidents WHERE id = ? LIMIT 1",
        (accident_id,)
    )
    row = cursor.fetchone()
    return dict(row) if row else None


def get_all_findings(conn: sqlite3.Connection) -> list[str]:
    """Get every non-null findings field, in row order."""
    cursor = conn.execute(
        "SELECT findings FROM accidents WHERE findings IS NOT NULL ORDER BY id"
    )
    return [row["findings"] for row in cursor.fetchall()]


# --- Statistics ---

def get_accident_stats(conn: sqlite3.Connection) -> dict:
    """
    Get headline counts for the whole database.

    Returns:
        Dict with keys:
        - total_events: int
        - events_with_probable_cause: int
        - events_with_findings: int
        - fatal_accidents: int
        - serious_accidents: int
        - minor_accidents: int
        - no_injury_accidents: int
    """
    cursor = conn.execute(
        """
        SELECT
            COUNT(*) as total_events,
            SUM(CASE WHEN probable_cause IS NOT NULL THEN 1 ELSE 0 END) as events_with_probable_cause,
            SUM(CASE WHEN findings IS NOT NULL THEN 1 ELSE 0 END) as events_with_findings,
            SUM(CASE WHEN highest_severity = ? THEN 1 ELSE 0 END) as fatal_accidents,
            SUM(CASE WHEN highest_severity = ? THEN 1 ELSE 0 END) as serious_accidents,
            SUM(CASE WHEN highest_severity = ? THEN 1 ELSE 0 END) as minor_accidents,
            SUM(CASE WHEN highest_severity = ? THEN 1 ELSE 0 END) as no_injury_accidents
        FROM accidents
        """,
        (SEVERITY_FATAL, SEVERITY_SERIOUS, SEVERITY_MINOR, SEVERITY_NONE)
    )
    row = cursor.fetchone()
    # SUM() over an empty table is NULL
    return {key: row[key] or 0 for key in row.keys()}


def get_filter_options(conn: sqlite3.Connection) -> dict:
    """
    Get the distinct values offered by the search filters.

    Returns:
        Dict with keys: states (all, sorted), makes (first 200, sorted)
    """
    cursor = conn.execute(
        """
        SELECT DISTINCT state FROM accidents
        WHERE state IS NOT NULL AND state != ''
        ORDER BY state
        """
    )
    states = [row["state"] for row in cursor.fetchall()]

    cursor = conn.execute(
        """
        SELECT DISTINCT aircraft_make FROM accidents
        WHERE aircraft_make IS NOT NULL AND aircraft_make != ''
        ORDER BY aircraft_make
        LIMIT ?
        """,
        (MAX_FILTER_MAKES,)
    )
    makes = [row["aircraft_make"] for row in cursor.fetchall()]

    return {"states": states, "makes": makes}


# --- Search ---

def _is_iso_date(value: str) -> bool:
    """True for a calendar date written exactly as YYYY-MM-DD."""
    try:
        return date.fromisoformat(value).isoformat() == value
    except (TypeError, ValueError):
        return False


@dataclass
class SearchFilters:
    """
    Filters for accident search.

    Raises:
        ValueError: If limit is outside 1..100, offset is negative or a
            date bound is not YYYY-MM-DD
    """
    search: str | None = None
    severity: list[str] = field(default_factory=list)
    state: str | None = None
    date_from: str | None = None  # YYYY-MM-DD, inclusive
    date_to: str | None = None    # YYYY-MM-DD, inclusive
    aircraft_make: str | None = None
    has_probable_cause: bool = False
    limit: int = DEFAULT_SEARCH_LIMIT
    offset: int = 0

    def __post_init__(self):
        if not 1 <= self.limit <= MAX_SEARCH_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        for name in ("date_from", "date_to"):
            value = getattr(self, name)
            if value is not None and not _is_iso_date(value):
                raise ValueError(f"{name} must be YYYY-MM-DD, got {value!r}")


def build_search_clause(filters: SearchFilters) -> tuple[str, list]:
    """
    Build the WHERE clause for a search.

    Returns:
        (where_sql, params) tuple; where_sql is "" when no filter applies
    """
    conditions = []
    params: list = []

    if filters.search:
        term = f"%{filters.search}%"
        conditions.append(
            "(" + " OR ".join(f"{column} LIKE ?" for column in SEARCH_COLUMNS) + ")"
        )
        params.extend(term for _ in SEARCH_COLUMNS)

    if filters.severity:
        placeholders = ", ".join("?" for _ in filters.severity)
        conditions.append(f"highest_severity IN ({placeholders})")
        params.extend(filters.severity)

    if filters.state:
        conditions.append("state = ?")
        params.append(filters.state)

    if filters.aircraft_make:
        conditions.append("aircraft_make = ?")
        params.append(filters.aircraft_make)

    if filters.has_probable_cause:
        conditions.append("probable_cause IS NOT NULL")

    if filters.date_from:
        conditions.append("event_date_iso >= ?")
        params.append(filters.date_from)

    if filters.date_to:
        conditions.append("event_date_iso <= ?")
        params.append(filters.date_to)

    if not conditions:
        return "", params
    return "WHERE " + " AND ".join(conditions), params


def search_accidents(conn: sqlite3.Connection, filters: SearchFilters) -> tuple[list[dict], int]:
    """
    Search accidents, newest rows first.

    Returns:
        (page of accident rows, total matching row count) tuple
    """
    where_sql, params = build_search_clause(filters)

    cursor = conn.execute(
        f"SELECT COUNT(*) as total FROM accidents {where_sql}",
        params
    )
    total = cursor.fetchone()["total"]

    cursor = conn.execute(
        f"""
        SELECT * FROM accidents
        {where_sql}
        ORDER BY id DESC
        LIMIT ? OFFSET ?
        """,
        [*params, filters.limit, filters.offset]
    )
    return [dict(row) for row in cursor.fetchall()], total
