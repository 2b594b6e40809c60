"""Wildcard name patterns.

A pattern is a plain string where ``*`` stands for "zero or more of any
character". Everything else is literal, so dots, brackets and backslashes in
qualified names never act as regex syntax. Matching is case-sensitive and
anchored to the whole candidate:

    compile_pattern("app.models.*")("app.models.User")        -> True
    compile_pattern("app.models.User")("app.models.UserTeam") -> False
    compile_pattern("A.B*")("AXB123")                          -> False
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from .exceptions import PatternError

WILDCARD = "*"


@dataclass(frozen=True)
class WildcardPattern:
    """A compiled wildcard pattern, usable directly as a predicate."""

    pattern: str
    regex: re.Pattern[str] = field(repr=False, compare=False)

    def matches(self, candidate: Any) -> bool:
        if candidate is None:
            return False
        return self.regex.fullmatch(str(candidate)) is not None

    def __call__(self, candidate: Any) -> bool:
        return self.matches(candidate)

    @property
    def is_literal(self) -> bool:
        """True when the pattern has no wildcard and only matches itself."""
        return WILDCARD not in self.pattern


def to_regex(pattern: str) -> str:
    """Translate a wildcard pattern to an (unanchored) regular expression."""
    return ".*".join(re.escape(literal) for literal in pattern.split(WILDCARD))


@lru_cache(maxsize=512)
def _compile(pattern: str) -> WildcardPattern:
    try:
        regex = re.compile(to_regex(pattern))
    except re.error as e:
        raise PatternError(f"Invalid wildcard pattern: {e}", pattern=pattern) from e
    return WildcardPattern(pattern, regex)


def compile_pattern(pattern: str) -> WildcardPattern:
    """Compile a wildcard pattern into a matcher.

    Args:
        pattern: Wildcard pattern (e.g. ``"app.models.*"``, ``"*Controller"``)

    Returns:
        Compiled, reusable matcher

    Raises:
        PatternError: If the pattern is not a string
    """
    if not isinstance(pattern, str):
        raise PatternError(
            "Pattern must be a string",
            pattern=pattern,
            suggestions=["Pass a wildcard string such as 'app.models.*'"],
        )
    return _compile(pattern)


def matches_pattern(value: Any, pattern: str) -> bool:
    """One-shot helper: does ``value`` match the wildcard ``pattern``?"""
    return compile_pattern(pattern).matches(value)


__all__ = ["WILDCARD", "WildcardPattern", "compile_pattern", "matches_pattern", "to_regex"]
