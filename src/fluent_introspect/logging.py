"""
Logging configuration for fluent-introspect.

Every module logs through ``logging.getLogger(__name__)`` under the
``fluent_introspect`` namespace. The package is silent by default; turn on
verbose output to see which lookups degraded and why.
"""

import logging
from contextlib import contextmanager
from typing import IO, Iterator, Optional

from .exceptions import ConfigurationError

ROOT_LOGGER = "fluent_introspect"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_logger = logging.getLogger(ROOT_LOGGER)
_logger.addHandler(logging.NullHandler())


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level '{name}'",
            suggestions=["Use one of DEBUG, INFO, WARNING, ERROR"],
        )
    return level


def _drop_stream_handlers() -> None:
    for handler in list(_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)


def enable_verbose(
    level: str = "INFO", format: Optional[str] = None, stream: Optional[IO[str]] = None
) -> None:
    """Send package log records to ``stream`` (stderr by default).

    Filters that raise are logged at DEBUG before they count as a miss, so
    this is the place to start when a chain matches less than expected.
    Calling it again replaces the previous handler.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string
        stream: Optional text stream for the records

    Raises:
        ConfigurationError: If ``level`` is not a logging level name

    Example:
        enable_verbose("DEBUG")
        Introspect.classes().where_implements("app.contracts.Billable").get()
        disable_verbose()
    """
    numeric = _level(level)
    _drop_stream_handlers()

    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    _logger.addHandler(handler)
    _logger.setLevel(numeric)


def disable_verbose() -> None:
    """Back to silent: drop the handler and reset the level to WARNING."""
    _drop_stream_handlers()
    _logger.setLevel(logging.WARNING)


def is_verbose() -> bool:
    return any(not isinstance(h, logging.NullHandler) for h in _logger.handlers)


@contextmanager
def verbose(level: str = "DEBUG", format: Optional[str] = None) -> Iterator[None]:
    """Verbose output for the duration of a ``with`` block."""
    enable_verbose(level, format)
    try:
        yield
    finally:
        disable_verbose()
