"""
ntsbexplorer/cli.py
-------------------
Command-line interface for NTSB Explorer.

Usage:
    ntsb-explorer import                     # Load the JSONL export into SQLite
    ntsb-explorer import --file x.jsonl      # Load a specific export
    ntsb-explorer stats                      # Headline counts
    ntsb-explorer search --search cessna     # Search accidents
    ntsb-explorer show 42                    # One accident with its findings
    ntsb-explorer causes                     # Category overview
    ntsb-explorer causes --category Aircraft --search engine
    ntsb-explorer causes --json out.json     # Export category summary
    ntsb-explorer analytics -q "SELECT * FROM accidents_by_year"
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from .config import ACCIDENTS_JSONL_PATH, DB_PATH, LOG_DIR


def setup_logging(command: str, verbose: bool = False) -> logging.Logger:
    """Configure logging to console and file."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    log_file = LOG_DIR / f"ntsb_{command}_{timestamp}.log"

    log_level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging to {log_file}")
    return logger


def cmd_import(args, logger):
    """Import accident records from the JSONL export."""
    from collection.import_accidents import import_accidents

    try:
        stats = import_accidents(args.file, args.db, limit=args.limit)
    except ValueError as e:
        print(f"Invalid import: {e}")
        return 2

    print(f"\nImport complete:")
    print(f"  Imported:   {stats['imported']:,}")
    print(f"  Duplicates: {stats['duplicates']:,}")
    print(f"  Errors:     {stats['errors']:,}")
    return 0


def cmd_stats(args, logger):
    """Show headline database counts."""
    from .api import get_stats

    stats = get_stats(args.db)

    print("NTSB Explorer Database")
    print("=" * 50)
    print(f"Database: {args.db}")
    print()
    print(f"  Total events:          {stats['total_events']:,}")
    print(f"  With probable cause:   {stats['events_with_probable_cause']:,}")
    print(f"  With findings:         {stats['events_with_findings']:,}")
    print()
    print("By highest injury:")
    print(f"  Fatal:                 {stats['fatal_accidents']:,}")
    print(f"  Serious:               {stats['serious_accidents']:,}")
    print(f"  Minor:                 {stats['minor_accidents']:,}")
    print(f"  None:                  {stats['no_injury_accidents']:,}")

    if stats["total_events"] == 0:
        print("\nNo accidents loaded. Run 'ntsb-explorer import' first.")
    return 0


def cmd_search(args, logger):
    """Search accidents and print one line per match."""
    from sqlite.queries import SearchFilters
    from .api import search
    from .display import format_event_date, severity_label

    try:
        filters = SearchFilters(
            search=args.search,
            severity=args.severity or [],
            state=args.state,
            date_from=args.date_from,
            date_to=args.date_to,
            aircraft_make=args.make,
            has_probable_cause=args.has_probable_cause,
            limit=args.limit,
            offset=args.offset,
        )
    except ValueError as e:
        print(f"Invalid search: {e}")
        return 2

    results = search(filters, args.db)
    accidents = results["accidents"]

    if not accidents:
        print("No accidents match the search.")
        return 0

    print(f"\nShowing {len(accidents)} of {results['total']:,} matching accidents:")
    print("=" * 100)
    for row in accidents:
        aircraft = " ".join(filter(None, [row["aircraft_make"], row["aircraft_model"]])) or "Unknown aircraft"
        place = ", ".join(filter(None, [row["city"], row["state"]])) or "Unknown location"
        print(f"  #{row['id']:<7} {row['ntsb_number'] or row['event_id']:<14} "
              f"{format_event_date(row['event_date']):<20} {severity_label(row['highest_severity']):<15} "
              f"{aircraft[:25]:<25} {place}")

    remaining = results["total"] - (args.offset + len(accidents))
    if remaining > 0:
        print(f"\n... {remaining:,} more (use --offset {args.offset + len(accidents)})")
    return 0


def cmd_show(args, logger):
    """Show a single accident with its parsed findings."""
    from findings import parse_findings
    from findings.export import describe_entry
    from .api import get_by_id
    from .display import format_event_date, light_label, severity_label

    row = get_by_id(args.id, args.db)
    if row is None:
        print(f"Accident #{args.id} not found.")
        return 1

    print("\n" + "=" * 70)
    print(f"{row['ntsb_number'] or row['event_id']}  -  {severity_label(row['highest_severity'])}")
    print("=" * 70)
    print(f"  Date:       {format_event_date(row['event_date'])}")
    print(f"  Location:   {', '.join(filter(None, [row['city'], row['state'], row['country']])) or 'Unknown'}")
    print(f"  Aircraft:   {' '.join(filter(None, [row['aircraft_make'], row['aircraft_model']])) or 'Unknown'}")
    print(f"  Phase:      {row['flight_phase'] or 'Unknown'}")
    print(f"  Weather:    {row['weather'] or 'Unknown'} / {light_label(row['light_condition'])}")
    print(f"  Injuries:   {row['fatal_count'] or 0} fatal, {row['serious_count'] or 0} serious, "
          f"{row['minor_count'] or 0} minor")

    if row["probable_cause"]:
        print("\nProbable cause:")
        print(f"  {row['probable_cause']}")

    entries = parse_findings(row["findings"])
    if entries:
        print(f"\nFindings ({row['cause_count'] or 0} causes, "
              f"{row['factor_count'] or 0} contributing factors):")
        for entry in entries:
            shown = describe_entry(entry)
            trail = f"  ({shown['trail']})" if shown["trail"] else ""
            print(f"  [{shown['label']:<7}] {shown['headline']}{trail}")
    else:
        print("\nNo findings available for this accident.")

    return 0


def cmd_causes(args, logger):
    """Category overview and ranked findings."""
    from findings.export import (
        category_share,
        filter_findings,
        format_finding_line,
        write_export_json,
        write_findings_csv,
    )
    from .api import get_category_stats

    summary = get_category_stats(args.db)

    if args.json:
        path = write_export_json(summary, args.json)
        print(f"Category summary written to {path}")
    if args.csv:
        path = write_findings_csv(summary.findings, args.csv)
        print(f"Ranked findings written to {path}")
    if args.json or args.csv:
        return 0

    print("\n" + "=" * 70)
    print("CAUSES & CONTRIBUTING FACTORS")
    print("=" * 70)
    print(f"Total findings:        {summary.total_findings:,}")
    print(f"Direct causes:         {summary.total_causes:,}")
    print(f"Contributing factors:  {summary.total_factors:,}")

    if not args.category and not args.search:
        for cat in summary.categories:
            print(f"\n{cat.category}")
            print("-" * 50)
            print(f"  {cat.total:,} findings ({category_share(cat, summary):.1f}% of all), "
                  f"{cat.causes:,} causes, {cat.factors:,} factors")
            for sub in cat.subcategories[:args.top_subcategories]:
                print(f"    {sub.name:<45} {sub.count:>7,}")

    findings = filter_findings(summary.findings, args.category, args.search)
    print(f"\nTop findings ({len(findings)} shown of {len(summary.findings)} ranked):")
    for finding in findings[:args.limit]:
        print(f"  {format_finding_line(finding)}")

    print("=" * 70)
    return 0


def cmd_analytics(args, logger):
    """Run the DuckDB analytics shell or a single query."""
    from analytics.cli import main as analytics_main

    argv = ["--db", str(args.db)]
    if args.query:
        argv += ["--query", args.query]
    return analytics_main(argv)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ntsb-explorer",
        description="NTSB Explorer - browse and aggregate NTSB aviation accident records",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--db",
        type=Path,
        default=DB_PATH,
        help=f"SQLite database (default: {DB_PATH})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # import command
    import_parser = subparsers.add_parser("import", help="Load accidents from a JSONL export")
    import_parser.add_argument(
        "--file",
        type=Path,
        default=ACCIDENTS_JSONL_PATH,
        help=f"JSONL export (default: {ACCIDENTS_JSONL_PATH})",
    )
    import_parser.add_argument("--limit", type=int, metavar="N", help="Import at most N records")
    import_parser.set_defaults(func=cmd_import)

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show headline counts")
    stats_parser.set_defaults(func=cmd_stats)

    # search command
    search_parser = subparsers.add_parser("search", help="Search accidents")
    search_parser.add_argument("--search", "-s", help="Text matched against IDs, cause, city, make, model")
    search_parser.add_argument(
        "--severity",
        action="append",
        choices=["FATL", "SERS", "MINR", "NONE", "UNKN"],
        help="Highest injury severity (repeatable)",
    )
    search_parser.add_argument("--state", help="Two-letter state code")
    search_parser.add_argument("--make", help="Aircraft make (exact)")
    search_parser.add_argument("--date-from", metavar="YYYY-MM-DD", help="Earliest event date")
    search_parser.add_argument("--date-to", metavar="YYYY-MM-DD", help="Latest event date")
    search_parser.add_argument(
        "--has-probable-cause",
        action="store_true",
        help="Only accidents with a probable cause",
    )
    search_parser.add_argument("--limit", type=int, default=24, help="Results per page, 1-100 (default: 24)")
    search_parser.add_argument("--offset", type=int, default=0, help="Rows to skip (default: 0)")
    search_parser.set_defaults(func=cmd_search)

    # show command
    show_parser = subparsers.add_parser("show", help="Show one accident")
    show_parser.add_argument("id", type=int, help="Accident row ID")
    show_parser.set_defaults(func=cmd_show)

    # causes command
    causes_parser = subparsers.add_parser("causes", help="Causes and contributing factors by category")
    causes_parser.add_argument("--category", help="Only findings in this category")
    causes_parser.add_argument("--search", help="Filter findings by text")
    causes_parser.add_argument("--limit", type=int, default=25, help="Findings to list (default: 25)")
    causes_parser.add_argument(
        "--top-subcategories",
        type=int,
        default=5,
        help="Subcategories per category in the overview (default: 5)",
    )
    causes_parser.add_argument("--json", type=Path, metavar="PATH", help="Write category summary JSON")
    causes_parser.add_argument("--csv", type=Path, metavar="PATH", help="Write ranked findings CSV")
    causes_parser.set_defaults(func=cmd_causes)

    # analytics command
    analytics_parser = subparsers.add_parser("analytics", help="DuckDB analytics shell")
    analytics_parser.add_argument("--query", "-q", help="Run a single query and exit")
    analytics_parser.set_defaults(func=cmd_analytics)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logger = setup_logging(args.command, args.verbose)

    try:
        exit_code = args.func(args, logger)
    except FileNotFoundError as e:
        logger.error(str(e))
        exit_code = 1
    except Exception as e:
        logger.exception(f"Command failed: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
