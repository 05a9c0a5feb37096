"""
sqlite/schema.py
----------------
Database schema definitions for NTSB Explorer.

SCHEMA_VERSION history:
- v1: accidents table (flattened NTSB accident records)
"""

SCHEMA_VERSION = 1

# Accidents table - one row per NTSB event, flattened from the JSONL export
ACCIDENTS_TABLE = """
CREATE TABLE IF NOT EXISTS accidents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id TEXT UNIQUE NOT NULL,
    ntsb_number TEXT,
    event_date TEXT,                     -- As published, e.g. "03/14/2019 00:00:00"
    event_date_iso TEXT,                 -- YYYY-MM-DD, NULL if unparseable

    -- Location
    city TEXT,
    state TEXT,
    country TEXT,
    latitude TEXT,
    longitude TEXT,

    -- Aircraft
    aircraft_make TEXT,
    aircraft_model TEXT,
    aircraft_category TEXT,
    far_part TEXT,
    damage TEXT,

    -- Conditions
    weather TEXT,
    light_condition TEXT,
    flight_phase TEXT,

    -- Injuries
    highest_severity TEXT,               -- FATL, SERS, MINR, NONE, UNKN
    fatal_count INTEGER DEFAULT 0,
    serious_count INTEGER DEFAULT 0,
    minor_count INTEGER DEFAULT 0,

    -- Narratives and causes
    probable_cause TEXT,
    narrative_preliminary TEXT,
    narrative_factual TEXT,

    -- Contributing factors ("path - C | path - F | ...")
    findings TEXT,
    cause_count INTEGER DEFAULT 0,
    factor_count INTEGER DEFAULT 0,

    created_at TEXT NOT NULL
);
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_accidents_state ON accidents(state);",
    "CREATE INDEX IF NOT EXISTS idx_accidents_make ON accidents(aircraft_make);",
    "CREATE INDEX IF NOT EXISTS idx_accidents_severity ON accidents(highest_severity);",
    "CREATE INDEX IF NOT EXISTS idx_accidents_date ON accidents(event_date_iso);",
]

# All tables combined
ALL_TABLES = [
    ACCIDENTS_TABLE,
]

# Columns written by the importer, in insert order
ACCIDENT_COLUMNS = [
    "event_id", "ntsb_number", "event_date", "event_date_iso",
    "city", "state", "country", "latitude", "longitude",
    "aircraft_make", "aircraft_model", "aircraft_category", "far_part", "damage",
    "weather", "light_condition", "flight_phase",
    "highest_severity", "fatal_count", "serious_count", "minor_count",
    "probable_cause", "narrative_preliminary", "narrative_factual",
    "findings", "cause_count", "factor_count",
]
