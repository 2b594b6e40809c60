"""
Views command: list templates and how they include and extend each other.

Usage:
    fluent-introspect views templates
    fluent-introspect views templates --extends layouts.app
    fluent-introspect views resources/views --syntax blade --uses "partials.*"
    fluent-introspect views --namespace mail=vendor/mail/templates
"""

from __future__ import annotations

import argparse
import sys

from ..config import Config
from ..exceptions import IntrospectError
from ..logging import enable_verbose
from ..query import ViewsQuery
from ..registries import FileViewFinder
from ..templates import SYNTAXES
from .output import print_json, print_rows

COLUMNS = ("view", "extends", "includes")


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths", nargs="*", help="Template roots (default: [views] paths from the config)"
    )
    parser.add_argument(
        "--namespace",
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Namespaced template root (can be used multiple times)",
    )
    parser.add_argument("--syntax", choices=list(SYNTAXES), help="Template syntax")
    parser.add_argument("--name", help="View name pattern (* matches anything)")
    parser.add_argument("--extends", help="Only views extending a layout matching the pattern")
    parser.add_argument("--uses", help="Only views including a view matching the pattern")
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log degraded lookups")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for views command."""
    parser = argparse.ArgumentParser(
        prog="fluent-introspect views",
        description="List template views",
    )
    add_arguments(parser)
    return run(parser.parse_args(argv))


def _parse_namespaces(values: list[str]) -> dict[str, list[str]]:
    namespaces: dict[str, list[str]] = {}
    for value in values:
        name, sep, path = value.partition("=")
        if not sep or not name or not path:
            raise ValueError(f"Invalid --namespace '{value}', expected NAME=PATH")
        namespaces.setdefault(name, []).append(path)
    return namespaces


def run(args: argparse.Namespace) -> int:
    try:
        namespaces = _parse_namespaces(args.namespace)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        config = Config.load()
        if args.verbose or config.defaults.verbose:
            enable_verbose("DEBUG")

        for name, paths in config.views.namespaces.items():
            namespaces.setdefault(name, list(paths))
        finder = FileViewFinder(
            paths=args.paths or config.views.paths,
            hints=namespaces,
            extensions=config.views.extensions or None,
            syntax=args.syntax or config.views.syntax,
        )
        if not finder.paths and not finder.hints:
            print("Error: no template paths given and none configured", file=sys.stderr)
            return 1

        query = ViewsQuery(finder)
        if args.name:
            query = query.where_name_equals(args.name)
        if args.extends:
            query = query.where_extends(args.extends)
        if args.uses:
            query = query.where_uses(args.uses)
        rows = [
            {"view": view, "extends": query.extends(view), "includes": query.includes(view)}
            for view in query.get()
        ]
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
