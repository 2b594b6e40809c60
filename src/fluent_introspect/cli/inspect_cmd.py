"""
Class and method commands: dump everything known about one target.

Usage:
    fluent-introspect class myapp.models.User
    fluent-introspect class myapp.models.User --format json
    fluent-introspect method myapp.services.Billing charge
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict

from rich.console import Console

from ..config import Config
from ..exceptions import IntrospectError
from ..logging import enable_verbose
from ..inspectors import ClassIntrospector, MethodIntrospector
from .output import print_json, print_mapping, print_rows


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log degraded lookups")


def add_class_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Dotted path of the class (module.ClassName)")
    _add_common(parser)


def add_method_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Dotted path of the class (module.ClassName)")
    parser.add_argument("method", help="Method name")
    _add_common(parser)


def class_main(argv: list[str] | None = None) -> int:
    """Main entry point for class command."""
    parser = argparse.ArgumentParser(prog="fluent-introspect class", description="Inspect a class")
    add_class_arguments(parser)
    return run_class(parser.parse_args(argv))


def method_main(argv: list[str] | None = None) -> int:
    """Main entry point for method command."""
    parser = argparse.ArgumentParser(
        prog="fluent-introspect method", description="Inspect a method"
    )
    add_method_arguments(parser)
    return run_method(parser.parse_args(argv))


def _output_format(args: argparse.Namespace) -> str:
    config = Config.load()
    if args.verbose or config.defaults.verbose:
        enable_verbose("DEBUG")
    return args.format or config.defaults.format


def run_class(args: argparse.Namespace) -> int:
    try:
        output_format = _output_format(args)
        data = ClassIntrospector(args.target).to_dict()
    except IntrospectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output_format == "json":
        print_json(data)
        return 0

    console = Console()
    parameters = data.pop("constructor_parameters")
    print_mapping(data, title=data["name"], console=console)
    if parameters:
        print_rows(
            parameters,
            ("name", "type", "default", "is_promoted", "is_variadic"),
            title="Constructor parameters",
            console=console,
        )
    return 0


def run_method(args: argparse.Namespace) -> int:
    try:
        output_format = _output_format(args)
        data = MethodIntrospector(args.target, args.method).to_dict()
    except IntrospectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output_format == "json":
        print_json(data)
        return 0

    console = Console()
    parameters = data.pop("parameters")
    doc: Dict[str, Any] = data.pop("docstring")
    data["description"] = doc["description"]
    print_mapping(data, title=f"{data['class']}.{data['name']}", console=console)
    if parameters:
        for param in parameters:
            param["description"] = doc["params"].get(param["name"])
        print_rows(
            parameters,
            ("name", "type", "default", "is_optional", "description"),
            title="Parameters",
            console=console,
        )
    return 0


if __name__ == "__main__":
    sys.exit(class_main())
