"""
collection - Load NTSB accident exports into the local database.
"""
