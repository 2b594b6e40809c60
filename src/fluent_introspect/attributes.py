"""Attribute metadata for classes and callables.

Python has no native declaration attributes, so metadata objects are attached
with the :func:`attribute` decorator and read back by the reflection helpers::

    @dataclass(frozen=True)
    class Table:
        name: str

    @attribute(Table("users"))
    class User:
        @attribute(Deprecated())
        def legacy(self): ...

Attributes belong to the decorated object only; subclasses do not inherit
them. Class constants carry attributes through ``typing.Annotated`` metadata
instead (see :mod:`fluent_introspect.inspectors.constant`).
"""

from __future__ import annotations

from typing import Any, Callable, Tuple, TypeVar

ATTRIBUTES_KEY = "__introspect_attributes__"

T = TypeVar("T")


def _holder(target: Any) -> Any:
    # staticmethod/classmethod wrappers keep metadata on the wrapped function
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def attribute(*instances: Any) -> Callable[[T], T]:
    """Attach metadata instances to a class or callable.

    Stacking the decorator appends; declaration order is preserved.
    """

    def decorate(target: T) -> T:
        holder = _holder(target)
        if isinstance(holder, type):
            existing = holder.__dict__.get(ATTRIBUTES_KEY, ())
        else:
            existing = getattr(holder, ATTRIBUTES_KEY, ())
        # decorators apply bottom-up, so the new ones go first
        setattr(holder, ATTRIBUTES_KEY, tuple(instances) + tuple(existing))
        return target

    return decorate


def attached(target: Any) -> Tuple[Any, ...]:
    """Return the metadata instances attached directly to ``target``."""
    holder = _holder(target)
    if isinstance(holder, type):
        return tuple(holder.__dict__.get(ATTRIBUTES_KEY, ()))
    return tuple(getattr(holder, ATTRIBUTES_KEY, ()))
