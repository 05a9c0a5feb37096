"""
ntsbexplorer/config.py
----------------------
Shared configuration for all NTSB Explorer modules.

Loads settings from environment variables with sensible defaults.
"""
import os
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

# Project root (parent of this file's directory)
PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# SQLite database path (inside sqlite/ directory)
DB_PATH = Path(os.getenv("NTSB_DB_PATH", PROJECT_ROOT / "sqlite" / "ntsb_explorer.db"))

# Log directory
LOG_DIR = Path(os.getenv("NTSB_LOG_DIR", PROJECT_ROOT / "logs"))

# NTSB accident export (one JSON record per line)
ACCIDENTS_JSONL_PATH = Path(os.getenv(
    "NTSB_ACCIDENTS_JSONL",
    PROJECT_ROOT / "data" / "ntsb_accidents.jsonl",
))
