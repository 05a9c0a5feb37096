"""
ntsbexplorer - NTSB aviation accident explorer.

Query facade, configuration and command-line interface.
"""

__version__ = "0.1.0"
