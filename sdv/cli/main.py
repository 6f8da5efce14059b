"""
SDV CLI — Command-line interface for document validation.

Exit codes:
    0  every document passed
    1  at least one document failed or aborted (or a fixture expectation
       was not met)
    2  a file could not be read
"""

import argparse
import sys
from pathlib import Path

from pydantic import TypeAdapter

from sdv import __version__
from sdv.config.loader import get_default_profile_name, list_profiles
from sdv.core.engine import get_engine, run_fixtures
from sdv.ir.enums import ValidationStatus
from sdv.ir.schema import ValidationReport
from sdv.tree.loader import load_document

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_IO_ERROR = 2

_reports_adapter = TypeAdapter(list[ValidationReport])


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or SDV_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (engine,metadata,structure,loader,config,system). Default: all",
    )


def add_profile_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        choices=list_profiles(),
        help="Validator profile (default: SDV_PROFILE env var, or 'default')",
    )


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="sdv",
        description="Standards Document Validator",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sdv {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate HTML documents")
    validate_parser.add_argument(
        "files",
        nargs="+",
        type=str,
        help="HTML documents to validate",
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format: text (default) or json (list of reports)",
    )
    validate_parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path (default: stdout)",
    )
    add_profile_argument(validate_parser)
    add_logging_arguments(validate_parser)

    # Fixture suite command
    fixtures_parser = subparsers.add_parser(
        "check-fixtures",
        help="Check that each fixture's outcome matches its declared expectation",
    )
    fixtures_parser.add_argument(
        "directory",
        type=str,
        help="Directory of *.html fixtures carrying <meta itemprop=\"test\">",
    )
    add_profile_argument(fixtures_parser)
    add_logging_arguments(fixtures_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    setup_logging(args)

    if args.command == "validate":
        return run_validate(args)
    if args.command == "check-fixtures":
        return run_check_fixtures(args)

    return EXIT_OK


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging from the command line before anything logs."""
    from sdv.core.logging import configure_logging

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(
        level=args.log_level,
        channels=channels,
        force=True,
    )


def run_validate(args: argparse.Namespace) -> int:
    """Run the validate command."""
    engine = get_engine(args.profile or get_default_profile_name())

    reports: list[ValidationReport] = []
    io_error = False

    for file in args.files:
        try:
            document = load_document(file)
        except OSError as e:
            print(f"sdv: cannot read {file}: {e.strerror or e}", file=sys.stderr)
            io_error = True
            continue
        reports.append(engine.validate_document(document))

    if args.format == "json":
        output = _reports_adapter.dump_json(reports, indent=2, by_alias=True).decode()
    else:
        output = "\n".join(format_report(r) for r in reports)

    if args.output:
        Path(args.output).write_text(output + "\n")
    elif output:
        print(output)

    if io_error:
        return EXIT_IO_ERROR
    if any(r.has_failed for r in reports):
        return EXIT_FAILED
    return EXIT_OK


def format_report(report: ValidationReport) -> str:
    """
    Human-readable report.

    A fatal run shows only its abort reason; a failed run lists every
    diagnostic in detection order.
    """
    source = report.source or "<memory>"

    if report.status == ValidationStatus.FATAL:
        return f"{source}: FATAL: {report.fatal_reason}"

    if report.status == ValidationStatus.PASSED:
        return f"{source}: OK"

    lines = [f"{source}: {len(report.diagnostics)} error(s)"]
    for entry in report.diagnostics:
        lines.append(f"  {entry.format()}")
    return "\n".join(lines)


def run_check_fixtures(args: argparse.Namespace) -> int:
    """Run the check-fixtures command."""
    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"sdv: not a directory: {directory}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        outcomes = run_fixtures(directory, args.profile or get_default_profile_name())
    except OSError as e:
        print(f"sdv: cannot read fixture: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    failures = 0
    for outcome in outcomes:
        verdict = "PASS" if outcome.passed else "FAIL"
        expected = outcome.expected or "undeclared"
        print(f"{verdict} {outcome.path.name} (expected {expected}, got {outcome.report.status.value})")
        if not outcome.passed:
            failures += 1
            for entry in outcome.report.diagnostics:
                print(f"    {entry.format()}")
            if outcome.report.fatal_reason:
                print(f"    [fatal] {outcome.report.fatal_reason}")

    print(f"\n{len(outcomes) - failures}/{len(outcomes)} fixtures passed")
    return EXIT_FAILED if failures else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
