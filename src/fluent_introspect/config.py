"""
Configuration files for fluent-introspect.

Two TOML files are read over the built-in defaults, later files winning key
by key:

1. User config: ~/.config/fluent-introspect/config.toml
2. Project config: .fluent-introspect.toml (or fluent-introspect.toml), the
   nearest one at or above the working directory, never past a ``.git`` root

Command-line flags win over both.
"""

import tomllib
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Iterator

from .exceptions import ConfigurationError
from .templates import SYNTAXES

CONFIG_FILENAMES = [".fluent-introspect.toml", "fluent-introspect.toml"]

USER_CONFIG_PATH = Path.home() / ".config" / "fluent-introspect" / "config.toml"

OUTPUT_FORMATS = ("table", "json")


@dataclass
class DefaultsConfig:
    """Options shared by every command."""

    format: str = "table"
    verbose: bool = False


@dataclass
class DiscoveryConfig:
    """Where class discovery looks and how jobs are recognised."""

    modules: list[str] = field(default_factory=list)
    include_stdlib: bool = False
    job_suffixes: list[str] = field(default_factory=lambda: ["Job"])
    job_module_segments: list[str] = field(default_factory=lambda: ["jobs"])


@dataclass
class ViewsConfig:
    """Template search roots for the views query."""

    paths: list[str] = field(default_factory=list)
    namespaces: dict[str, list[str]] = field(default_factory=dict)
    extensions: list[str] = field(default_factory=list)
    syntax: str = "jinja"


SECTIONS = {
    "defaults": DefaultsConfig,
    "discovery": DiscoveryConfig,
    "views": ViewsConfig,
}

KNOWN_KEYS = {section: {f.name for f in fields(cls)} for section, cls in SECTIONS.items()}


def _invalid(name: str, value: Any, source: str, expected: str) -> ConfigurationError:
    return ConfigurationError(
        f"Config key '{name}' must be {expected}",
        context={"file": source, "value": repr(value)},
    )


def _bool(name: str, value: Any, source: str) -> bool:
    if not isinstance(value, bool):
        raise _invalid(name, value, source, "bool")
    return value


def _str_list(name: str, value: Any, source: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _invalid(name, value, source, "a list of strings")
    return value


def _namespaces(name: str, value: Any, source: str) -> dict[str, list[str]]:
    if not isinstance(value, dict):
        raise _invalid(name, value, source, "a table")
    resolved = {}
    for namespace, roots in value.items():
        if isinstance(roots, str):
            roots = [roots]
        resolved[namespace] = _str_list(f"{name}.{namespace}", roots, source)
    return resolved


def _one_of(choices: tuple[str, ...], label: str) -> Callable[[str, Any, str], str]:
    def check(name: str, value: Any, source: str) -> str:
        if not isinstance(value, str) or value not in choices:
            raise ConfigurationError(
                f"Unknown {label}: {value}",
                context={"file": source, "key": name},
                suggestions=[f"Use one of: {', '.join(choices)}"],
            )
        return value

    return check


_VALIDATORS: dict[str, Callable[[str, Any, str], Any]] = {
    "defaults.format": _one_of(OUTPUT_FORMATS, "output format"),
    "defaults.verbose": _bool,
    "discovery.modules": _str_list,
    "discovery.include_stdlib": _bool,
    "discovery.job_suffixes": _str_list,
    "discovery.job_module_segments": _str_list,
    "views.paths": _str_list,
    "views.namespaces": _namespaces,
    "views.extensions": _str_list,
    "views.syntax": _one_of(SYNTAXES, "template syntax"),
}


@dataclass
class Config:
    """Effective configuration, with the file each value came from."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    views: ViewsConfig = field(default_factory=ViewsConfig)

    sources: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Read the user and project files over the built-in defaults.

        Args:
            start_dir: Where the project search starts (default: current directory)

        Raises:
            ConfigurationError: If a file is not valid TOML or holds a bad value
        """
        config = cls()
        for path in _config_files(start_dir or Path.cwd()):
            config._apply(_load_toml_file(path), str(path))
        return config

    def _apply(self, data: dict[str, Any], source: str) -> None:
        for section, values in data.items():
            if section not in KNOWN_KEYS:
                warnings.warn(f"Unknown config section '{section}' in {source}", stacklevel=3)
                continue
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Config section '{section}' must be a table", context={"file": source}
                )
            target = getattr(self, section)
            for key, value in values.items():
                name = f"{section}.{key}"
                if key not in KNOWN_KEYS[section]:
                    warnings.warn(f"Unknown config key '{name}' in {source}", stacklevel=3)
                    continue
                setattr(target, key, _VALIDATORS[name](name, value, source))
                self.sources[name] = source

    def get_source(self, key: str) -> str:
        """File that set ``key`` ("section.name"), or ``"default"``."""
        return self.sources.get(key, "default")

    def items(self) -> list[tuple[str, Any]]:
        """Flattened ``("section.key", value)`` pairs in declaration order."""
        return [
            (f"{section}.{f.name}", getattr(getattr(self, section), f.name))
            for section in SECTIONS
            for f in fields(getattr(self, section))
        ]


def _config_files(start_dir: Path) -> Iterator[Path]:
    """Existing config files, lowest precedence first."""
    if USER_CONFIG_PATH.is_file():
        yield USER_CONFIG_PATH
    project = _find_project_config(start_dir)
    if project is not None:
        yield project


def _find_project_config(start_dir: Path) -> Path | None:
    """Nearest project config at or above ``start_dir``; the search ends at a ``.git`` root."""
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        if (directory / ".git").exists():
            return None
    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Parse one config file.

    Raises:
        ConfigurationError: If the file is unreadable or not valid TOML
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read config file {path}", context={"file": str(path), "reason": str(e)}
        ) from e
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e


def generate_template() -> str:
    """Commented-out TOML covering every known key, for ``config --init``."""
    return """# fluent-introspect configuration file
# Place as .fluent-introspect.toml in project root or
# ~/.config/fluent-introspect/config.toml for user defaults

[defaults]
# Output format: table, json
# format = "table"

# Enable verbose (DEBUG) logging by default
# verbose = false

[discovery]
# Module prefixes to import and restrict class discovery to
# modules = ["myapp"]

# Also consider classes defined by the standard library
# include_stdlib = false

# Class name suffixes that mark a queued job
# job_suffixes = ["Job"]

# Module path segments that mark a queued job (e.g. myapp.jobs.send_email)
# job_module_segments = ["jobs"]

[views]
# Template search roots
# paths = ["templates"]

# Template syntax: jinja, blade
# syntax = "jinja"

# File extensions to treat as templates (default depends on syntax)
# extensions = [".html", ".jinja"]

# Namespaced template roots, referenced as "namespace::view.name"
# [views.namespaces]
# mail = ["vendor/mail/templates"]
"""


def get_config_paths() -> dict[str, Path | None]:
    """The user and project files a load from the working directory would read."""
    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.is_file() else None,
        "project": _find_project_config(Path.cwd()),
    }
