"""
NTSB Explorer - setup.py
------------------------
Installs all NTSB Explorer packages and provides CLI entry point.

Usage:
    pip install -e .
    ntsb-explorer --help
"""
from setuptools import setup, find_packages

setup(
    name="ntsb-explorer",
    version="0.1.0",
    description="NTSB Aviation Accident Explorer - search and findings categorization",
    author="NTSB Explorer",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "python-dotenv",
        "duckdb",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "ntsb-explorer=ntsbexplorer.cli:main",
        ],
    },
)
