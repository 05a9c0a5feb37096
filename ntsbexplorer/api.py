"""
ntsbexplorer/api.py
-------------------
Query facade used by the CLI and any front end.

Every operation opens the configured database, runs one query and closes it.
If the database file doesn't exist yet, each operation returns its empty
result (zero counts, empty lists, None) instead of raising, so callers can
render an empty explorer before the first import.
"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from findings import FindingsSummary, aggregate_findings
from findings.config import FINDINGS_CONFIG, FindingsConfig
from sqlite.connection import init_db
from sqlite.queries import (
    SearchFilters,
    get_accident_by_id,
    get_accident_stats,
    get_all_findings,
    get_filter_options as query_filter_options,
    search_accidents,
)

from .config import DB_PATH

logger = logging.getLogger(__name__)

EMPTY_STATS = {
    "total_events": 0,
    "events_with_probable_cause": 0,
    "events_with_findings": 0,
    "fatal_accidents": 0,
    "serious_accidents": 0,
    "minor_accidents": 0,
    "no_injury_accidents": 0,
}


@contextmanager
def open_database(db_path: Path | str = DB_PATH) -> Iterator[sqlite3.Connection | None]:
    """Yield a connection, or None if the database hasn't been created."""
    db_path = Path(db_path)
    if not db_path.exists():
        logger.warning(f"Database not found at {db_path}")
        yield None
        return

    conn = init_db(db_path)
    try:
        yield conn
    finally:
        conn.close()


def get_stats(db_path: Path | str = DB_PATH) -> dict:
    """Headline counts (events, probable causes, findings, severities)."""
    with open_database(db_path) as conn:
        if conn is None:
            return dict(EMPTY_STATS)
        return get_accident_stats(conn)


def get_filter_options(db_path: Path | str = DB_PATH) -> dict:
    """Distinct states and aircraft makes for the search filters."""
    with open_database(db_path) as conn:
        if conn is None:
            return {"states": [], "makes": []}
        return query_filter_options(conn)


def search(filters: SearchFilters | None = None, db_path: Path | str = DB_PATH) -> dict:
    """
    Search accidents.

    Returns:
        Dict with keys: accidents (list of rows), total (matching rows)
    """
    if filters is None:
        filters = SearchFilters()

    with open_database(db_path) as conn:
        if conn is None:
            return {"accidents": [], "total": 0}
        rows, total = search_accidents(conn, filters)
        return {"accidents": rows, "total": total}


def get_by_id(accident_id: int, db_path: Path | str = DB_PATH) -> dict | None:
    """Single accident row, or None."""
    with open_database(db_path) as conn:
        if conn is None:
            return None
        return get_accident_by_id(conn, accident_id)


def load_findings_texts(db_path: Path | str = DB_PATH) -> list[str]:
    """
    Read every non-null findings field.

    An unavailable database yields an empty list rather than an error.
    """
    try:
        with open_database(db_path) as conn:
            if conn is None:
                return []
            return get_all_findings(conn)
    except sqlite3.Error as e:
        logger.error(f"Could not read findings from {db_path}: {e}")
        return []


def get_category_stats(
    db_path: Path | str = DB_PATH,
    config: FindingsConfig = FINDINGS_CONFIG,
) -> FindingsSummary:
    """Category rollups and ranked findings over the whole findings corpus."""
    texts = load_findings_texts(db_path)
    logger.info(f"Aggregating findings from {len(texts):,} accidents")
    return aggregate_findings(texts, config)
