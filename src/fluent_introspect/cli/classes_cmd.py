"""
Classes command: query the classes declared in a set of modules.

Usage:
    fluent-introspect classes myapp
    fluent-introspect classes myapp --name "myapp.http.*Controller"
    fluent-introspect classes myapp --implements myapp.contracts.Repository --concrete
    fluent-introspect classes myapp --extends myapp.models.Base --format json
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

from .. import discovery, reflection
from ..config import Config
from ..exceptions import IntrospectError
from ..logging import enable_verbose
from ..query import ClassesQuery
from .output import print_json, print_rows

COLUMNS = ("class", "parent", "interfaces", "traits", "abstract")


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "modules",
        nargs="*",
        help="Modules (and packages) to import and search (default: [discovery] modules)",
    )
    parser.add_argument("--name", help="Qualified name pattern (* matches anything)")
    parser.add_argument("--extends", help="Parent class (dotted path)")
    parser.add_argument("--implements", help="Interface (dotted path)")
    parser.add_argument("--uses", help="Mixin (dotted path)")
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--concrete", action="store_true", help="Only concrete classes")
    kind.add_argument("--abstract", action="store_true", help="Only abstract classes")
    parser.add_argument(
        "--include-stdlib", action="store_true", help="Also consider standard-library classes"
    )
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log degraded lookups")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for classes command."""
    parser = argparse.ArgumentParser(
        prog="fluent-introspect classes",
        description="Query declared classes",
    )
    add_arguments(parser)
    return run(parser.parse_args(argv))


def build_query(args: argparse.Namespace, modules: List[str], include_stdlib: bool) -> ClassesQuery:
    query = ClassesQuery(modules, include_stdlib)
    if args.name:
        query = query.where_name_equals(args.name)
    if args.extends:
        query = query.where_extends(args.extends)
    if args.implements:
        query = query.where_implements(args.implements)
    if args.uses:
        query = query.where_uses(args.uses)
    if args.concrete:
        query = query.where_concrete()
    if args.abstract:
        query = query.where_abstract()
    return query


def describe_class(cls: type) -> Dict[str, Any]:
    parent = reflection.primary_base(cls)
    return {
        "class": reflection.qualified_name(cls),
        "parent": reflection.qualified_name(parent) if parent is not None else None,
        "interfaces": [reflection.qualified_name(i) for i in reflection.interfaces(cls)],
        "traits": [reflection.qualified_name(t) for t in reflection.all_traits(cls)],
        "abstract": reflection.is_abstract(cls),
    }


def run(args: argparse.Namespace) -> int:
    try:
        config = Config.load()
        if args.verbose or config.defaults.verbose:
            enable_verbose("DEBUG")

        modules = args.modules or config.discovery.modules
        if not modules:
            print("Error: no modules given and none configured", file=sys.stderr)
            print("Pass module names or set [discovery] modules in the config", file=sys.stderr)
            return 1
        imported = discovery.import_modules(modules)
        if not imported:
            print(f"Error: could not import any of: {', '.join(modules)}", file=sys.stderr)
            return 1

        include_stdlib = args.include_stdlib or config.discovery.include_stdlib
        query = build_query(args, modules, include_stdlib)
        rows = [describe_class(cls) for cls in query.get()]
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
