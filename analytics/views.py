"""
Pre-built analytical views for NTSB Explorer DuckDB analytics.

All views read the SQLite accidents table attached as ``sqlite``.
"""

import logging

import duckdb

logger = logging.getLogger(__name__)

# View definitions
VIEWS = {
    "accident_summary": """
        CREATE OR REPLACE VIEW accident_summary AS
        SELECT
            COUNT(*) as total_events,
            COUNT(probable_cause) as with_probable_cause,
            COUNT(findings) as with_findings,
            SUM(fatal_count) as total_fatalities,
            SUM(serious_count) as total_serious_injuries,
            SUM(minor_count) as total_minor_injuries
        FROM sqlite.accidents
    """,

    "accidents_by_severity": """
        CREATE OR REPLACE VIEW accidents_by_severity AS
        SELECT
            COALESCE(highest_severity, 'UNKN') as severity,
            COUNT(*) as events,
            ROUND(100.0 * COUNT(*) / SUM(COUNT(*)) OVER (), 1) as pct,
            SUM(fatal_count) as fatalities
        FROM sqlite.accidents
        GROUP BY severity
        ORDER BY events DESC
    """,

    "accidents_by_state": """
        CREATE OR REPLACE VIEW accidents_by_state AS
        SELECT
            state,
            COUNT(*) as events,
            SUM(CASE WHEN highest_severity = 'FATL' THEN 1 ELSE 0 END) as fatal_events
        FROM sqlite.accidents
        WHERE state IS NOT NULL AND state != ''
        GROUP BY state
        ORDER BY events DESC
    """,

    "accidents_by_year": """
        CREATE OR REPLACE VIEW accidents_by_year AS
        SELECT
            EXTRACT(YEAR FROM CAST(event_date_iso AS DATE))::INTEGER as year,
            COUNT(*) as events,
            SUM(CASE WHEN highest_severity = 'FATL' THEN 1 ELSE 0 END) as fatal_events,
            SUM(fatal_count) as fatalities
        FROM sqlite.accidents
        WHERE event_date_iso IS NOT NULL
        GROUP BY year
        ORDER BY year
    """,

    "accidents_by_make": """
        CREATE OR REPLACE VIEW accidents_by_make AS
        SELECT
            aircraft_make,
            COUNT(*) as events,
            SUM(CASE WHEN highest_severity = 'FATL' THEN 1 ELSE 0 END) as fatal_events
        FROM sqlite.accidents
        WHERE aircraft_make IS NOT NULL AND aircraft_make != ''
        GROUP BY aircraft_make
        ORDER BY events DESC
    """,

    "accidents_by_flight_phase": """
        CREATE OR REPLACE VIEW accidents_by_flight_phase AS
        SELECT
            COALESCE(flight_phase, 'UNKNOWN') as flight_phase,
            COUNT(*) as events,
            ROUND(100.0 * COUNT(*) / SUM(COUNT(*)) OVER (), 1) as pct
        FROM sqlite.accidents
        GROUP BY flight_phase
        ORDER BY events DESC
    """,

    "findings_coverage": """
        CREATE OR REPLACE VIEW findings_coverage AS
        SELECT
            COALESCE(highest_severity, 'UNKN') as severity,
            COUNT(*) as events,
            COUNT(findings) as with_findings,
            SUM(cause_count) as causes,
            SUM(factor_count) as factors,
            ROUND(AVG(cause_count + factor_count), 2) as avg_findings_per_event
        FROM sqlite.accidents
        GROUP BY severity
        ORDER BY events DESC
    """,
}


def register_views(conn: duckdb.DuckDBPyConnection) -> list[str]:
    """
    Register all pre-built views in the DuckDB connection.

    Args:
        conn: DuckDB connection with the SQLite database attached as ``sqlite``

    Returns:
        List of registered view names
    """
    registered = []

    for name, sql in VIEWS.items():
        try:
            conn.execute(sql)
            registered.append(name)
        except duckdb.Error as e:
            logger.warning(f"Could not create view '{name}': {e}")

    return registered


def list_views() -> list[str]:
    """Return list of all available view names."""
    return list(VIEWS.keys())
