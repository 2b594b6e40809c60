"""
Config command: inspect and scaffold fluent-introspect configuration.

Usage:
    fluent-introspect config                    Effective values and their sources
    fluent-introspect config --init [--user]    Write a commented template
    fluent-introspect config --paths            Which files are read
    fluent-introspect config get views.syntax   One value, raw
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from .. import config as config_module
from ..config import CONFIG_FILENAMES, KNOWN_KEYS, Config, generate_template, get_config_paths
from ..exceptions import ConfigurationError


def add_arguments(parser: argparse.ArgumentParser) -> None:
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--show", action="store_true", help="Effective values and sources (default)")
    mode.add_argument("--init", action="store_true", help="Write a template config file")
    mode.add_argument("--paths", action="store_true", help="List the config files that are read")
    parser.add_argument("action", nargs="?", choices=["get"], help="Read a single value")
    parser.add_argument("key", nargs="?", help="Key for 'get', as section.name")
    parser.add_argument(
        "--user",
        action="store_true",
        help="With --init, write ~/.config/fluent-introspect/config.toml instead",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for config command."""
    parser = argparse.ArgumentParser(
        prog="fluent-introspect config",
        description="Inspect fluent-introspect configuration",
    )
    add_arguments(parser)
    return run(parser.parse_args(argv))


def run(args: argparse.Namespace) -> int:
    try:
        if args.init:
            return _write_template(config_module.USER_CONFIG_PATH if args.user else None)
        if args.paths:
            return _list_paths()
        if args.action == "get":
            return _print_value(args.key)
        return _print_effective()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _toml(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, list):
        return f"[{', '.join(_toml(v) for v in value)}]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k} = {_toml(v)}" for k, v in value.items()) + "}"
    return str(value)


def _print_effective() -> int:
    config = Config.load()
    print("# Effective fluent-introspect configuration")
    section = None
    for key, value in config.items():
        owner, name = key.split(".", 1)
        if owner != section:
            section = owner
            print(f"\n[{section}]")
        source = config.get_source(key)
        origin = source if source == "default" else Path(source).name
        print(f"{name} = {_toml(value)}  # from: {origin}")
    return 0


def _list_paths() -> int:
    found = get_config_paths()
    user_path = config_module.USER_CONFIG_PATH
    print(f"user     {user_path}  ({'loaded' if found['user'] else 'not found'})")
    if found["project"]:
        print(f"project  {found['project']}  (loaded)")
    else:
        print(f"project  {' or '.join(CONFIG_FILENAMES)}  (not found)")
    return 0


def _write_template(target: Path | None) -> int:
    target = target or Path.cwd() / CONFIG_FILENAMES[0]
    if target.exists():
        print(f"Error: {target} already exists; edit it or remove it first", file=sys.stderr)
        return 1
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error: cannot write {target}: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {target}; every setting is commented out at its default.")
    return 0


def _print_value(key: str | None) -> int:
    """Print one value; strings bare, everything else as TOML. A non-default source goes to stderr."""
    if not key:
        print("Error: 'get' requires a key such as defaults.format", file=sys.stderr)
        return 1
    section, dot, name = key.partition(".")
    if not dot:
        print(f"Error: Invalid key format '{key}', expected section.name", file=sys.stderr)
        return 1
    if section not in KNOWN_KEYS:
        print(
            f"Error: Unknown config section '{section}' (known: {', '.join(KNOWN_KEYS)})",
            file=sys.stderr,
        )
        return 1
    if name not in KNOWN_KEYS[section]:
        print(f"Error: Unknown key '{name}' in [{section}]", file=sys.stderr)
        return 1

    config = Config.load()
    value = getattr(getattr(config, section), name)
    print(value if isinstance(value, str) else _toml(value))
    if config.get_source(key) != "default":
        print(f"# from {config.get_source(key)}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
