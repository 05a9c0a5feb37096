"""
NTSB Explorer Analytics CLI

Interactive DuckDB shell over the accidents database.

Usage:
    python -m analytics.cli                           # Interactive shell
    python -m analytics.cli --query "SELECT ..."      # Run single query
    python -m analytics.cli --help                    # Show help
"""

import argparse
import sys
from pathlib import Path

import duckdb

from analytics.views import register_views, list_views
from ntsbexplorer.config import DB_PATH


def setup_connection(db_path: Path | str = DB_PATH) -> duckdb.DuckDBPyConnection:
    """
    Create an in-memory DuckDB connection with the SQLite database attached.

    Raises:
        FileNotFoundError: If the SQLite database doesn't exist
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"SQLite database not found at {db_path}")

    conn = duckdb.connect(":memory:")
    conn.execute(f"ATTACH '{db_path.as_posix()}' AS sqlite (TYPE SQLITE, READ_ONLY)")

    register_views(conn)
    return conn


def get_data_summary(conn: duckdb.DuckDBPyConnection) -> dict:
    """Get counts of loaded data."""
    summary = {"accidents": 0, "with_findings": 0}

    try:
        result = conn.execute(
            "SELECT total_events, with_findings FROM accident_summary"
        ).fetchone()
        if result:
            summary["accidents"] = result[0] or 0
            summary["with_findings"] = result[1] or 0
    except duckdb.Error:
        pass  # accident_summary not registered

    return summary


def print_banner(summary: dict, db_path: Path | str):
    """Print startup banner with data summary."""
    print()
    print("=" * 60)
    print("NTSB Explorer Analytics Engine (DuckDB)")
    print("=" * 60)
    print(f"SQLite attached: {db_path}")
    print(f"Loaded: {summary['accidents']:,} accidents | {summary['with_findings']:,} with findings")

    print()
    print("Available views:")
    views = list_views()
    # Print views in columns
    for i in range(0, len(views), 3):
        row = views[i:i+3]
        print("  " + ", ".join(row))

    print()
    print("Type SQL queries, '.help' for commands, or '.exit' to quit.")
    print("=" * 60)
    print()


def run_query(conn: duckdb.DuckDBPyConnection, query: str) -> bool:
    """
    Execute a query and print results.

    Returns:
        True if query succeeded, False otherwise
    """
    try:
        result = conn.execute(query)

        # Check if query returns results
        if result.description:
            df = result.fetchdf()
            if len(df) > 0:
                print(df.to_string(index=False))
            else:
                print("(0 rows)")
        else:
            print("OK")

        return True

    except duckdb.Error as e:
        print(f"Error: {e}")
        return False


def interactive_shell(conn: duckdb.DuckDBPyConnection, db_path: Path | str = DB_PATH):
    """Run interactive SQL shell."""
    summary = get_data_summary(conn)
    print_banner(summary, db_path)

    query_buffer = []

    while True:
        try:
            prompt = "...> " if query_buffer else "D > "
            line = input(prompt)

        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            query_buffer = []
            continue

        # Handle special commands
        stripped = line.strip().lower()

        if stripped in (".exit", ".quit", "exit", "quit"):
            break

        if stripped == ".help":
            print("""
Commands:
  .exit, .quit    Exit the shell
  .help           Show this help
  .views          List available views
  .schema TABLE   Show table schema

Example queries:
  SELECT * FROM accident_summary;
  SELECT * FROM accidents_by_year WHERE year >= 2000;
  SELECT * FROM accidents_by_make LIMIT 10;
  SELECT ntsb_number, probable_cause FROM sqlite.accidents WHERE findings ILIKE '%fuel%' LIMIT 5;
""")
            continue

        if stripped == ".views":
            for view in list_views():
                print(f"  {view}")
            continue

        if stripped.startswith(".schema "):
            table = line.strip()[8:].strip()
            run_query(conn, f"DESCRIBE {table}")
            continue

        # Accumulate multi-line queries
        query_buffer.append(line)
        full_query = " ".join(query_buffer)

        # Check if query is complete (ends with semicolon)
        if full_query.strip().endswith(";"):
            run_query(conn, full_query)
            query_buffer = []
        elif not full_query.strip():
            query_buffer = []


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="NTSB Explorer Analytics CLI - DuckDB query interface"
    )
    parser.add_argument(
        "--query", "-q",
        help="Run a single query and exit"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DB_PATH,
        help=f"SQLite database (default: {DB_PATH})"
    )

    args = parser.parse_args(argv)

    try:
        conn = setup_connection(args.db)
    except FileNotFoundError as e:
        print(e)
        print("Run 'ntsb-explorer import' first.")
        return 1

    try:
        if args.query:
            return 0 if run_query(conn, args.query) else 1
        interactive_shell(conn, args.db)
        return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
