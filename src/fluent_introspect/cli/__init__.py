"""
Command-line interface for fluent-introspect.

Provides commands via `fluent-introspect`:

    fluent-introspect classes <modules>        - Query declared classes
    fluent-introspect class <Class>            - Inspect one class
    fluent-introspect method <Class> <method>  - Inspect one method
    fluent-introspect jobs <modules>           - List queued jobs
    fluent-introspect views <paths>            - List template views
    fluent-introspect config                   - Show or create configuration

Examples:
    fluent-introspect classes myapp --implements myapp.contracts.Repository
    fluent-introspect classes myapp --name "*Controller" --concrete --format json
    fluent-introspect class myapp.models.User
    fluent-introspect method myapp.services.Billing charge
    fluent-introspect jobs myapp --queue emails
    fluent-introspect views templates --extends layouts.base
    fluent-introspect config --init
"""

import argparse
import sys
from typing import List, Optional

from fluent_introspect import __version__

from . import classes_cmd, config_cmd, inspect_cmd, jobs_cmd, views_cmd

__all__ = ["main"]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for fluent-introspect CLI."""
    parser = argparse.ArgumentParser(
        prog="fluent-introspect",
        description="Fluent introspection for Python code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--version", action="version", version=f"fluent-introspect {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    classes_parser = subparsers.add_parser("classes", help="Query declared classes")
    classes_cmd.add_arguments(classes_parser)
    classes_parser.set_defaults(handler=classes_cmd.run)

    class_parser = subparsers.add_parser("class", help="Inspect one class")
    inspect_cmd.add_class_arguments(class_parser)
    class_parser.set_defaults(handler=inspect_cmd.run_class)

    method_parser = subparsers.add_parser("method", help="Inspect one method")
    inspect_cmd.add_method_arguments(method_parser)
    method_parser.set_defaults(handler=inspect_cmd.run_method)

    jobs_parser = subparsers.add_parser("jobs", help="List queued jobs")
    jobs_cmd.add_arguments(jobs_parser)
    jobs_parser.set_defaults(handler=jobs_cmd.run)

    views_parser = subparsers.add_parser("views", help="List template views")
    views_cmd.add_arguments(views_parser)
    views_parser.set_defaults(handler=views_cmd.run)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_cmd.add_arguments(config_parser)
    config_parser.set_defaults(handler=config_cmd.run)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
