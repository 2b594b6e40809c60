"""Pydantic model query."""

from __future__ import annotations

import builtins
from typing import Any, Callable, List, Optional, Sequence

from .. import discovery, orm, reflection
from .base import BaseQuery, require_str


def _has_property(model: type, name: str) -> bool:
    return (
        name in orm.fields(model)
        or name in orm.computed_fields(model)
        or reflection.has_property(model, name)
    )


class ModelsQuery(BaseQuery):
    """Query pydantic model classes.

    Each ``where_has_*`` filter has a negated ``where_doesnt_have_*`` form
    and a ``where_has_*_properties(names, all=True)`` form that requires all
    (or, with ``all=False``, any) of several names.

    Example:
        Introspect.models(modules=["app"]) \\
            .where_has_fillable("email") \\
            .where_doesnt_have_hidden("email") \\
            .get()
    """

    def __init__(self, modules: Optional[Sequence[str]] = None, include_stdlib: bool = False):
        super().__init__()
        self.modules = list(modules) if modules else None
        self.include_stdlib = include_stdlib

    def _discover(self) -> List[type]:
        return [
            cls
            for cls in discovery.declared_classes(self.modules, self.include_stdlib)
            if orm.is_model(cls)
        ]

    def _model_test(self, test: Callable[[type, str], bool], name: str) -> Callable[[Any], bool]:
        def check(candidate: Any) -> bool:
            model = reflection.class_of(candidate)
            return model is not None and orm.is_model(model) and test(model, name)

        return check

    def _has(self, test: Callable[[type, str], bool], what: str, name: str) -> "ModelsQuery":
        require_str(name, f"{what.capitalize()} name")
        return self.where(self._model_test(test, name), f"has {what} {name}")

    def _doesnt_have(self, test: Callable[[type, str], bool], what: str, name: str) -> "ModelsQuery":
        require_str(name, f"{what.capitalize()} name")
        return self.where_not(self._model_test(test, name), f"has {what} {name}")

    def _has_all(
        self, test: Callable[[type, str], bool], what: str, names: Sequence[str], all: bool
    ) -> "ModelsQuery":
        names = [require_str(name, f"{what.capitalize()} name") for name in names]
        checks = [self._model_test(test, name) for name in names]
        mode = "all" if all else "any"

        def check(candidate: Any) -> bool:
            results = [c(candidate) for c in checks]
            # "all" of zero names holds
            return builtins.all(results) if all else builtins.any(results)

        return self.where(check, f"has {mode} {what} {names}")

    # properties

    def where_has_property(self, name: str) -> "ModelsQuery":
        return self._has(_has_property, "property", name)

    def where_doesnt_have_property(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(_has_property, "property", name)

    def where_has_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(_has_property, "property", names, all)

    def where_doesnt_have_properties(
        self, names: Sequence[str], all: bool = True
    ) -> "ModelsQuery":
        """Models lacking all (or, with ``all=False``, any) of the properties."""
        checks = [self._model_test(_has_property, name) for name in names]

        def check(candidate: Any) -> bool:
            missing = [not c(candidate) for c in checks]
            return builtins.all(missing) if all else builtins.any(missing)

        return self.where(check, f"lacks {'all' if all else 'any'} property {list(names)}")

    # fillable

    def where_has_fillable(self, name: str) -> "ModelsQuery":
        return self._has(lambda m, n: n in orm.fillable(m), "fillable", name)

    def where_doesnt_have_fillable(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(lambda m, n: n in orm.fillable(m), "fillable", name)

    def where_has_fillable_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(lambda m, n: n in orm.fillable(m), "fillable", names, all)

    # hidden

    def where_has_hidden(self, name: str) -> "ModelsQuery":
        return self._has(lambda m, n: n in orm.hidden(m), "hidden", name)

    def where_doesnt_have_hidden(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(lambda m, n: n in orm.hidden(m), "hidden", name)

    def where_has_hidden_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(lambda m, n: n in orm.hidden(m), "hidden", names, all)

    # appended

    def where_has_appended(self, name: str) -> "ModelsQuery":
        return self._has(lambda m, n: n in orm.appended(m), "appended", name)

    def where_doesnt_have_appended(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(lambda m, n: n in orm.appended(m), "appended", name)

    def where_has_appended_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(lambda m, n: n in orm.appended(m), "appended", names, all)

    # readable / writable

    def where_has_readable(self, name: str) -> "ModelsQuery":
        return self._has(orm.readable, "readable", name)

    def where_doesnt_have_readable(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(orm.readable, "readable", name)

    def where_has_readable_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(orm.readable, "readable", names, all)

    def where_has_writable(self, name: str) -> "ModelsQuery":
        return self._has(orm.writable, "writable", name)

    def where_doesnt_have_writable(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(orm.writable, "writable", name)

    def where_has_writable_properties(self, names: Sequence[str], all: bool = True) -> "ModelsQuery":
        return self._has_all(orm.writable, "writable", names, all)

    # relationships

    def where_has_relationship(self, name: str) -> "ModelsQuery":
        return self._has(orm.has_relationship, "relationship", name)

    def where_doesnt_have_relationship(self, name: str) -> "ModelsQuery":
        return self._doesnt_have(orm.has_relationship, "relationship", name)
