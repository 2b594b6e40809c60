"""
Jobs command: list queued jobs and their settings.

Usage:
    fluent-introspect jobs myapp
    fluent-introspect jobs myapp --queue emails
    fluent-introspect jobs myapp --marker-only --unique --format json
"""

from __future__ import annotations

import argparse
import sys

from .. import discovery
from ..config import Config
from ..exceptions import IntrospectError
from ..logging import enable_verbose
from ..query import MARKER_ONLY, JobHeuristic, JobsQuery
from .output import print_json, print_rows

COLUMNS = ("class", "queue", "connection", "tries", "middleware", "unique", "encrypted")


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "modules",
        nargs="*",
        help="Modules (and packages) to import and search (default: [discovery] modules)",
    )
    parser.add_argument("--queue", help="Only jobs on this queue")
    parser.add_argument("--connection", help="Only jobs on this connection")
    parser.add_argument("--unique", action="store_true", help="Only unique jobs")
    parser.add_argument("--encrypted", action="store_true", help="Only encrypted jobs")
    parser.add_argument(
        "--marker-only",
        action="store_true",
        help="Only classes implementing ShouldQueue, ignoring names and modules",
    )
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log degraded lookups")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for jobs command."""
    parser = argparse.ArgumentParser(prog="fluent-introspect jobs", description="List queued jobs")
    add_arguments(parser)
    return run(parser.parse_args(argv))


def run(args: argparse.Namespace) -> int:
    try:
        config = Config.load()
        if args.verbose or config.defaults.verbose:
            enable_verbose("DEBUG")

        modules = args.modules or config.discovery.modules
        if not modules:
            print("Error: no modules given and none configured", file=sys.stderr)
            return 1
        if not discovery.import_modules(modules):
            print(f"Error: could not import any of: {', '.join(modules)}", file=sys.stderr)
            return 1

        heuristic = MARKER_ONLY if args.marker_only else JobHeuristic.from_config(config.discovery)
        query = JobsQuery(modules, heuristic, config.discovery.include_stdlib)
        if args.queue:
            query = query.where_queue(args.queue)
        if args.connection:
            query = query.where_connection(args.connection)
        if args.unique:
            query = query.where_unique()
        if args.encrypted:
            query = query.where_encrypted()
        rows = query.to_list()
    except IntrospectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if (args.format or config.defaults.format) == "json":
        print_json(rows)
    else:
        print_rows(rows, COLUMNS, title=query.describe())
    return 0


if __name__ == "__main__":
    sys.exit(main())
