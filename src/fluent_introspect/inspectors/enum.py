"""Introspection of a single ``enum.Enum`` class."""

from __future__ import annotations

import enum
from typing import Any, Dict, List, Optional

from .. import discovery, reflection
from ..exceptions import InvalidTargetError
from .base import HierarchyChecks

# value types that make an enum "backed"
_BACKING_TYPES = (int, str)


def _user_declared(owner: type) -> bool:
    return not discovery.is_stdlib_module(owner.__module__)


class EnumIntrospector(HierarchyChecks):
    """Inspect one enum.

    An enum is *backed* when its members are also ``int`` or ``str`` values
    (``IntEnum``, ``StrEnum``, ``class Color(str, Enum)``) and a *unit* enum
    otherwise. Methods, traits and interfaces are limited to those declared
    outside the standard library, so ``IntEnum``'s inherited ``int``
    machinery is not reported.

    Raises:
        InvalidTargetError: If the target is not an enum class
    """

    def __init__(self, target: Any):
        cls = reflection.resolve_class(target)
        if cls is None or not issubclass(cls, enum.Enum):
            raise InvalidTargetError(
                "Expected an enum class",
                target=target,
                suggestions=["Pass a subclass of enum.Enum or its dotted path"],
            )
        self.target = cls

    def where_backed(self) -> "EnumIntrospector":
        return self._check(lambda t: self.is_backed(), "backed")

    def where_unit(self) -> "EnumIntrospector":
        return self._check(lambda t: not self.is_backed(), "unit")

    def cases(self) -> List[str]:
        """Member names in definition order, aliases excluded."""
        return [member.name for member in self.target]

    def values(self) -> List[Any]:
        """Member values of a backed enum; empty for unit enums."""
        if not self.is_backed():
            return []
        return [member.value for member in self.target]

    def backed_type(self) -> Optional[str]:
        for kind in _BACKING_TYPES:
            if issubclass(self.target, kind):
                return kind.__name__
        return None

    def is_backed(self) -> bool:
        return self.backed_type() is not None

    def methods(self) -> List[str]:
        return [
            name
            for name, _, owner in reflection.methods(self.target)
            if _user_declared(owner)
            and not reflection.is_magic(name)
            and reflection.visibility(name) == "public"
        ]

    def traits(self) -> List[str]:
        return [
            reflection.qualified_name(trait)
            for trait in reflection.all_traits(self.target)
            if _user_declared(trait)
        ]

    def interfaces(self) -> List[str]:
        return [
            reflection.qualified_name(iface)
            for iface in reflection.interfaces(self.target)
            if _user_declared(iface)
        ]

    def attributes(self, kind: Any = None) -> List[Any]:
        return reflection.get_attributes(self.target, kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": reflection.qualified_name(self.target),
            "namespace": reflection.class_namespace(self.target),
            "short_name": reflection.class_basename(self.target),
            "is_backed": self.is_backed(),
            "backed_type": self.backed_type(),
            "cases": self.cases(),
            "values": self.values(),
            "traits": self.traits(),
            "interfaces": self.interfaces(),
            "methods": self.methods(),
        }
