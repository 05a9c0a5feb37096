"""
sqlite - SQLite storage for NTSB accident records.
"""
