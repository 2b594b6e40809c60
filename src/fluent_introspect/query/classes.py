"""Class, trait (mixin) and interface queries."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from .. import discovery, reflection
from .base import BaseQuery, require_str


def _label(target: Any) -> str:
    return reflection.qualified_name(target)


class _DeclaredQuery(BaseQuery):
    """A query over classes discovered in the running interpreter."""

    def __init__(self, modules: Optional[Sequence[str]] = None, include_stdlib: bool = False):
        super().__init__()
        self.modules = list(modules) if modules else None
        self.include_stdlib = include_stdlib


class ClassesQuery(_DeclaredQuery):
    """Query loaded classes.

    Candidates are class objects from discovery, or whatever ``in_()`` was
    given (class objects or dotted names); results keep that form.

    Example:
        Introspect.classes(modules=["app"]) \\
            .where_implements("app.contracts.Billable") \\
            .where_name_ends_with("Invoice") \\
            .get()
    """

    def _discover(self) -> List[type]:
        return discovery.declared_classes(self.modules, self.include_stdlib)

    def where_name(self, pattern: str) -> "ClassesQuery":
        """Alias of :meth:`where_name_equals`."""
        return self.where_name_equals(pattern)

    def where_extends(self, parent: Any) -> "ClassesQuery":
        return self.where(lambda c: reflection.extends_class(c, parent), f"extends {_label(parent)}")

    def where_doesnt_extend(self, parent: Any) -> "ClassesQuery":
        return self.where_not(
            lambda c: reflection.extends_class(c, parent), f"extends {_label(parent)}"
        )

    def where_implements(self, interface: Any) -> "ClassesQuery":
        return self.where(
            lambda c: reflection.implements_interface(c, interface),
            f"implements {_label(interface)}",
        )

    def where_doesnt_implement(self, interface: Any) -> "ClassesQuery":
        return self.where_not(
            lambda c: reflection.implements_interface(c, interface),
            f"implements {_label(interface)}",
        )

    def where_uses(self, trait: Any) -> "ClassesQuery":
        return self.where(lambda c: reflection.uses_trait(c, trait), f"uses {_label(trait)}")

    def where_doesnt_use(self, trait: Any) -> "ClassesQuery":
        return self.where_not(lambda c: reflection.uses_trait(c, trait), f"uses {_label(trait)}")

    def where_has_method(self, name: str) -> "ClassesQuery":
        require_str(name, "Method name")
        return self.where(lambda c: reflection.has_method(c, name), f"has method {name}")

    def where_has_attribute(self, kind: Any) -> "ClassesQuery":
        return self.where(
            lambda c: reflection.has_attribute(c, kind), f"has attribute {_label(kind)}"
        )

    def where_abstract(self) -> "ClassesQuery":
        return self.where(reflection.is_abstract, "abstract")

    def where_concrete(self) -> "ClassesQuery":
        return self.where(reflection.is_concrete, "concrete")


class TraitsQuery(_DeclaredQuery):
    """Query mixins.

    Discovery collects every mixin used by a loaded class. ``in_(classes)``
    narrows the universe to the mixins those classes use.
    """

    def _discover(self) -> List[type]:
        return discovery.declared_traits(self.modules, self.include_stdlib)

    def _from_explicit(self, candidates: List[Any]) -> List[type]:
        found = {}
        for cls in candidates:
            for trait in reflection.all_traits(cls):
                found.setdefault(trait, None)
        return list(found)

    def where_used_by(self, cls: Any) -> "TraitsQuery":
        return self.where(
            lambda trait: reflection.uses_trait(cls, trait), f"used by {_label(cls)}"
        )


class InterfacesQuery(_DeclaredQuery):
    """Query interfaces (ABCs with abstract members and protocols).

    Discovery lists every loaded interface. ``in_(classes)`` narrows the
    universe to the interfaces those classes implement.
    """

    def _discover(self) -> List[type]:
        return discovery.declared_interfaces(self.modules, self.include_stdlib)

    def _from_explicit(self, candidates: Iterable[Any]) -> List[type]:
        found = {}
        for cls in candidates:
            for iface in reflection.interfaces(cls):
                found.setdefault(iface, None)
        return list(found)

    def where_implemented_by(self, cls: Any) -> "InterfacesQuery":
        return self.where(
            lambda iface: reflection.implements_interface(cls, iface),
            f"implemented by {_label(cls)}",
        )
