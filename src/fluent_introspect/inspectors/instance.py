"""Introspection of a single object instance."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .. import reflection
from ..exceptions import InvalidTargetError
from .base import HierarchyChecks


class InstanceIntrospector(HierarchyChecks):
    """Class-level checks applied to an object's type, plus its own state.

    Property checks see attributes set on the instance as well as those
    declared by its class.
    """

    def __init__(self, instance: Any):
        if instance is None or isinstance(instance, type):
            raise InvalidTargetError(
                "Expected an object instance",
                target=instance,
                suggestions=["Use Introspect.class_() for classes"],
            )
        self.target = instance

    def where_extends(self, parent: Any) -> "InstanceIntrospector":
        return self._check(
            lambda t: reflection.extends_class(t, parent),
            f"extends {reflection.qualified_name(parent)}",
        )

    def where_has_property(self, name: str) -> "InstanceIntrospector":
        return self._check(lambda t: reflection.has_property(t, name), f"has property {name}")

    def class_name(self) -> str:
        return reflection.qualified_name(type(self.target))

    def basename(self) -> str:
        return reflection.class_basename(self.target)

    def namespace(self) -> str:
        return reflection.class_namespace(self.target)

    def all_traits(self) -> List[str]:
        return [reflection.qualified_name(t) for t in reflection.all_traits(self.target)]

    def public_methods(self) -> List[str]:
        return reflection.public_methods(self.target)

    def public_properties(self) -> List[str]:
        return reflection.public_properties(self.target)

    def attributes(self, kind: Any = None) -> List[Any]:
        return reflection.get_attributes(self.target, kind)

    def _parent(self) -> Optional[str]:
        base = reflection.primary_base(type(self.target))
        return reflection.qualified_name(base) if base is not None else None

    def to_dict(self) -> Dict[str, Any]:
        cls = type(self.target)
        return {
            "class": self.class_name(),
            "namespace": self.namespace(),
            "short_name": self.basename(),
            "is_abstract": reflection.is_abstract(cls),
            "is_final": reflection.is_final(cls),
            "traits": self.all_traits(),
            "interfaces": [reflection.qualified_name(i) for i in reflection.interfaces(cls)],
            "parent": self._parent(),
            "methods": self.public_methods(),
            "properties": self.public_properties(),
        }
