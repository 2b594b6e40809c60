"""Shared plumbing for single-target introspectors.

A detail introspector wraps one target (a class, an instance, an enum) and
collects nullary checks against it. ``passes()`` is true when every check
holds, and ``get()`` returns the target or ``None``. Like the query builders,
every ``where_*`` call returns a new introspector.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional, Tuple, TypeVar

from .. import reflection
from ..query.base import Filter

I = TypeVar("I", bound="TargetInspector")


class TargetInspector:
    """Fluent checks against ``self.target``."""

    target: Any

    _checks: Tuple[Filter, ...] = ()

    def _check(self: I, predicate: Callable[[Any], bool], description: str) -> I:
        new_inspector = copy.copy(self)
        new_inspector._checks = self._checks + (Filter(description, predicate),)
        return new_inspector

    def _check_not(self: I, predicate: Callable[[Any], bool], description: str) -> I:
        positive = Filter(description, predicate)
        return self._check(lambda target: not positive(target), f"not {description}")

    def passes(self) -> bool:
        """True when every registered check holds (vacuously true without checks)."""
        return all(check(self.target) for check in self._checks)

    def get(self) -> Optional[Any]:
        """The target when all checks pass, else ``None``."""
        return self.target if self.passes() else None

    def describe(self) -> str:
        return " AND ".join(check.description for check in self._checks) or "*"


class HierarchyChecks(TargetInspector):
    """Checks shared by class, instance and enum introspectors."""

    def where_uses_trait(self: I, trait: Any) -> I:
        return self._check(
            lambda t: reflection.uses_trait(t, trait), f"uses {reflection.qualified_name(trait)}"
        )

    def where_doesnt_use_trait(self: I, trait: Any) -> I:
        return self._check_not(
            lambda t: reflection.uses_trait(t, trait), f"uses {reflection.qualified_name(trait)}"
        )

    def where_implements(self: I, interface: Any) -> I:
        return self._check(
            lambda t: reflection.implements_interface(t, interface),
            f"implements {reflection.qualified_name(interface)}",
        )

    def where_doesnt_implement(self: I, interface: Any) -> I:
        return self._check_not(
            lambda t: reflection.implements_interface(t, interface),
            f"implements {reflection.qualified_name(interface)}",
        )

    def where_has_method(self: I, name: str) -> I:
        return self._check(lambda t: reflection.has_method(t, name), f"has method {name}")

    def where_doesnt_have_method(self: I, name: str) -> I:
        return self._check_not(lambda t: reflection.has_method(t, name), f"has method {name}")

    def where_has_public_method(self: I, name: str) -> I:
        return self._check(
            lambda t: reflection.method_is_public(t, name), f"has public method {name}"
        )

    def where_has_attribute(self: I, kind: Any) -> I:
        return self._check(
            lambda t: reflection.has_attribute(t, kind),
            f"has attribute {reflection.qualified_name(kind)}",
        )

    def where_doesnt_have_attribute(self: I, kind: Any) -> I:
        return self._check_not(
            lambda t: reflection.has_attribute(t, kind),
            f"has attribute {reflection.qualified_name(kind)}",
        )
