"""
Custom exception hierarchy for fluent-introspect.

Filter-oriented operations never raise: a lookup that fails simply makes the
predicate return ``False``. The exceptions below are reserved for mistakes
that have no sensible degraded result, such as an invalid wildcard pattern or
a detail introspector pointed at something that does not exist.

All exceptions include:
- Context information (target, pattern, path, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from fluent_introspect.exceptions import InvalidTargetError

    raise InvalidTargetError(
        "Class is not instantiable",
        context={"target": "app.jobs.BaseJob"},
        suggestions=["Point the introspector at a concrete subclass"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class IntrospectError(Exception):
    """
    Base exception for all fluent-introspect errors.

    ``str()`` renders the message followed by a ``Context:`` block (one
    ``key: value`` line each) and a ``Suggestions:`` bullet list, each block
    only when it has entries.

    Attributes:
        message: The one-line summary
        context: What was being looked at (target, pattern, file, ...)
        suggestions: Things the caller can try
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        blocks = [self.message]
        if self.context:
            blocks.append("Context:\n" + "\n".join(f"  {k}: {v}" for k, v in self.context.items()))
        if self.suggestions:
            blocks.append("Suggestions:\n" + "\n".join(f"  - {s}" for s in self.suggestions))
        return "\n\n".join(blocks)


class ConfigurationError(IntrospectError):
    """
    A query or configuration value is invalid.

    Raised at build time, never while candidates are being evaluated.

    Example::

        raise ConfigurationError(
            "or_() callback must return the query it builds",
            suggestions=["Use a lambda: q.or_(lambda sub: sub.where_name_equals('x'))"],
        )
    """

    pass


class PatternError(ConfigurationError):
    """
    A wildcard pattern could not be compiled.

    Example::

        raise PatternError(
            "Pattern must be a string",
            context={"pattern": 42},
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        pattern: Any = None,
    ):
        ctx = context or {}
        if pattern is not None and "pattern" not in ctx:
            ctx["pattern"] = repr(pattern)
        super().__init__(message, ctx, suggestions)


class InvalidTargetError(IntrospectError):
    """
    A detail introspector was constructed against an unusable target.

    Raised when the named class, method or callable does not exist, is not
    instantiable, or is not the kind of thing the introspector inspects.

    Example::

        raise InvalidTargetError(
            "Method not found",
            context={"class": "app.models.User", "method": "missing"},
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        target: Any = None,
    ):
        ctx = context or {}
        if target is not None and "target" not in ctx:
            ctx["target"] = target if isinstance(target, str) else repr(target)
        super().__init__(message, ctx, suggestions)


class ViewNotFoundError(IntrospectError):
    """
    A view name could not be resolved to a template file.

    Example::

        raise ViewNotFoundError(
            "View not found",
            context={"view": "emails.welcome", "searched": ["/app/templates"]},
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        view: Optional[str] = None,
        searched: Optional[List[Union[str, Path]]] = None,
    ):
        ctx = context or {}
        if view is not None and "view" not in ctx:
            ctx["view"] = view
        if searched is not None and "searched" not in ctx:
            ctx["searched"] = [str(path) for path in searched]
        super().__init__(message, ctx, suggestions)


__all__ = [
    "IntrospectError",
    "ConfigurationError",
    "PatternError",
    "InvalidTargetError",
    "ViewNotFoundError",
]
