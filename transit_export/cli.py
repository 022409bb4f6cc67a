"""Command-line interface for transit-export."""

import argparse
import logging
import sys
from datetime import date

from transit_export.api import export_lines, validate
from transit_export.model.models import ExportConfig, LineState
from transit_export.version import VERSION


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value}") from None


def cmd_export(args: argparse.Namespace) -> int:
    """Execute export command."""
    setup_logging(args.verbose)

    try:
        config = ExportConfig(
            input_path=args.input,
            output_path=args.output,
            line_ids=args.line or None,
            start_date=args.start_date,
            end_date=args.end_date,
            write_report=args.report,
        )
        report = export_lines(args.input, args.output, config)
        print("\nExport finished!")
        print(f"Output: {args.output}")
        for info in report.lines:
            print(f"  - {info.line_id} {info.name}: {info.status.value}")
        print(f"Stats: {report.stats}")
        if any(info.status is LineState.OK for info in report.lines):
            return 0
        print("No line has data on the requested period", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Export failed")
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command."""
    setup_logging(args.verbose)

    try:
        report = validate(args.input)
        if report.valid:
            print("\nValidation successful!")
            print(f"Stats: {report.stats}")
            if report.warnings:
                print(f"Warnings ({len(report.warnings)}):")
                for warning in report.warnings:
                    print(f"  - {warning}")
            return 0
        else:
            print(f"\nValidation failed with {len(report.errors)} errors:")
            for error in report.errors:
                print(f"  - {error}")
            return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Validation failed")
        return 1


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="transit-export",
        description="Export transit lines as de-duplicated closures over a date window",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export lines of a network")
    export_parser.add_argument("--input", required=True, help="Path to network JSON file")
    export_parser.add_argument(
        "--output", default="./export", help="Output directory (default: ./export)"
    )
    export_parser.add_argument(
        "--line",
        action="append",
        default=[],
        help="Line identifier to export, repeatable (default: every line)",
    )
    export_parser.add_argument(
        "--start-date",
        type=_parse_date,
        default=None,
        help="First date of the export window, YYYY-MM-DD (default: unbounded)",
    )
    export_parser.add_argument(
        "--end-date",
        type=_parse_date,
        default=None,
        help="Last date of the export window, YYYY-MM-DD (default: unbounded)",
    )
    export_parser.add_argument(
        "--report",
        type=lambda x: x.lower() == "true",
        default=True,
        help="Write report.json (default: true)",
    )
    export_parser.set_defaults(func=cmd_export)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a network file")
    validate_parser.add_argument("--input", required=True, help="Path to network JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    # Parse and execute
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
