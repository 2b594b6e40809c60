"""Introspection of a single class."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .. import reflection
from ..exceptions import InvalidTargetError
from .base import HierarchyChecks


def _names(classes: List[type]) -> List[str]:
    return [reflection.qualified_name(cls) for cls in classes]


class ClassIntrospector(HierarchyChecks):
    """Inspect one class, with fluent checks and structured accessors.

    Example:
        inspector = Introspect.class_("app.models.User")
        inspector.where_extends(BaseModel).where_concrete().passes()
        inspector.to_dict()

    Raises:
        InvalidTargetError: If the class cannot be resolved
    """

    def __init__(self, target: Any):
        cls = reflection.resolve_class(target)
        if cls is None:
            raise InvalidTargetError(
                "Class not found",
                target=target,
                suggestions=["Pass the class itself or its dotted path (module.ClassName)"],
            )
        self.target = cls

    @property
    def name(self) -> str:
        return reflection.qualified_name(self.target)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def where_extends(self, parent: Any) -> "ClassIntrospector":
        return self._check(
            lambda t: reflection.extends_class(t, parent),
            f"extends {reflection.qualified_name(parent)}",
        )

    def where_doesnt_extend(self, parent: Any) -> "ClassIntrospector":
        return self._check_not(
            lambda t: reflection.extends_class(t, parent),
            f"extends {reflection.qualified_name(parent)}",
        )

    def where_concrete(self) -> "ClassIntrospector":
        return self._check(reflection.is_concrete, "concrete")

    def where_abstract(self) -> "ClassIntrospector":
        return self._check(reflection.is_abstract, "abstract")

    def where_instantiable(self) -> "ClassIntrospector":
        return self._check(reflection.is_instantiable, "instantiable")

    def where_has_property(self, name: str) -> "ClassIntrospector":
        return self._check(lambda t: reflection.has_property(t, name), f"has property {name}")

    def where_doesnt_have_property(self, name: str) -> "ClassIntrospector":
        return self._check_not(lambda t: reflection.has_property(t, name), f"has property {name}")

    def where_has_static_methods(self) -> "ClassIntrospector":
        return self._check(lambda t: bool(reflection.static_methods(t)), "has static methods")

    def where_has_static_properties(self) -> "ClassIntrospector":
        return self._check(lambda t: bool(reflection.static_properties(t)), "has static properties")

    def where_has_constructor(self) -> "ClassIntrospector":
        return self._check(lambda t: reflection.constructor(t) is not None, "has constructor")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def all_traits(self) -> List[str]:
        return _names(reflection.all_traits(self.target))

    def interfaces(self) -> List[str]:
        return _names(reflection.interfaces(self.target))

    def direct_interfaces(self) -> List[str]:
        """Interfaces this class adds on top of its parent's."""
        return _names(reflection.direct_interfaces(self.target))

    def parent(self) -> Optional[str]:
        base = reflection.primary_base(self.target)
        return reflection.qualified_name(base) if base is not None else None

    def parent_classes(self) -> List[str]:
        """Parent chain, nearest first."""
        return _names(reflection.parent_classes(self.target))

    def public_methods(self) -> List[str]:
        return reflection.public_methods(self.target)

    def static_methods(self) -> List[str]:
        return reflection.static_methods(self.target)

    def public_properties(self) -> List[str]:
        return reflection.public_properties(self.target)

    def static_properties(self) -> List[str]:
        return reflection.static_properties(self.target)

    def attributes(self, kind: Any = None) -> List[Any]:
        return reflection.get_attributes(self.target, kind)

    def constructor_parameters(self) -> List[Dict[str, Any]]:
        return reflection.constructor_parameters(self.target)

    def to_dict(self) -> Dict[str, Any]:
        cls = self.target
        return {
            "name": self.name,
            "namespace": reflection.class_namespace(cls),
            "short_name": reflection.class_basename(cls),
            "is_abstract": reflection.is_abstract(cls),
            "is_final": reflection.is_final(cls),
            "is_instantiable": reflection.is_instantiable(cls),
            "traits": self.all_traits(),
            "interfaces": self.interfaces(),
            "direct_interfaces": self.direct_interfaces(),
            "parent": self.parent(),
            "parent_classes": self.parent_classes(),
            "methods": self.public_methods(),
            "static_methods": self.static_methods(),
            "properties": self.public_properties(),
            "static_properties": self.static_properties(),
            "constructor_parameters": self.constructor_parameters(),
        }
