"""Introspection of class constants.

A constant is a class-level data attribute named in upper case
(``MAX_SIZE``, ``_DEFAULT_TIMEOUT``), declared on the class or one of its
bases. Type hints add to that:

- ``typing.Final`` marks the constant final;
- ``typing.Annotated`` metadata are the constant's attributes::

    class Limits:
        MAX_USERS: Final[Annotated[int, Deprecated("use quotas")]] = 100
"""

from __future__ import annotations

import copy
import logging
import re
import typing
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .. import reflection
from ..exceptions import InvalidTargetError
from ..query.base import Filter

logger = logging.getLogger(__name__)

_CONSTANT_NAME = re.compile(r"^_*[A-Z][A-Z0-9_]*$")


@dataclass(frozen=True)
class ConstantInfo:
    name: str
    value: Any
    visibility: str
    final: bool
    type: Optional[str]
    attributes: Tuple[Any, ...] = field(default=())
    owner: Optional[type] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "visibility": self.visibility,
            "final": self.final,
            "type": self.type,
            "attributes": list(self.attributes),
        }


def type_hints(cls: type) -> Dict[str, Any]:
    """Evaluated class annotations with ``Annotated`` metadata kept.

    Falls back to the raw annotations when forward references cannot be
    resolved.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except Exception as e:
        logger.debug(f"Cannot evaluate annotations of {cls!r}: {e}")
        hints: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(reflection.annotations_of(klass))
        return hints


def is_final_hint(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.split("[", 1)[0].rsplit(".", 1)[-1] == "Final"
    if annotation is typing.Final or typing.get_origin(annotation) is typing.Final:
        return True
    if typing.get_origin(annotation) is typing.Annotated:
        return is_final_hint(typing.get_args(annotation)[0])
    return False


def annotated_metadata(annotation: Any) -> Tuple[Any, ...]:
    """Metadata of ``Annotated`` hints, looking through ``Final``/``ClassVar``."""
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        # get_args flattens to (type, *metadata)
        inner, *metadata = typing.get_args(annotation)
        return annotated_metadata(inner) + tuple(metadata)
    if origin in (typing.Final, typing.ClassVar):
        args = typing.get_args(annotation)
        return annotated_metadata(args[0]) if args else ()
    return ()


def _is_constant_value(value: Any) -> bool:
    if isinstance(value, (staticmethod, classmethod, property, type)):
        return False
    return not callable(value)


def declared_name(klass: type, name: str) -> str:
    """Undo name mangling: ``_Limits__SECRET`` declared on ``Limits`` is ``__SECRET``."""
    prefix = f"_{klass.__name__.lstrip('_')}__"
    if name.startswith(prefix) and len(name) > len(prefix):
        return "__" + name[len(prefix):]
    return name


def constants(cls: type) -> List[ConstantInfo]:
    """Constants visible on ``cls``, nearest declaration first."""
    hints = type_hints(cls)
    found: List[ConstantInfo] = []
    seen = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for attr, value in vars(klass).items():
            name = declared_name(klass, attr)
            if attr in seen or not _CONSTANT_NAME.match(name):
                continue
            seen.add(attr)
            if not _is_constant_value(value):
                continue
            hint = hints.get(attr)
            found.append(
                ConstantInfo(
                    name=name,
                    value=value,
                    visibility=reflection.visibility(name),
                    final=hint is not None and is_final_hint(hint),
                    type=reflection.format_type(hint) if hint is not None else None,
                    attributes=annotated_metadata(hint),
                    owner=klass,
                )
            )
    return found


class ConstantIntrospector:
    """Query the constants of one class.

    Example:
        Introspect.constants(Limits).where_final().where_public().names()

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
        self._checks: Tuple[Filter, ...] = ()

    def _check(self, predicate, description: str) -> "ConstantIntrospector":
        new_inspector = copy.copy(self)
        new_inspector._checks = self._checks + (Filter(description, predicate),)
        return new_inspector

    def where_public(self) -> "ConstantIntrospector":
        return self._check(lambda c: c.visibility == "public", "public")

    def where_protected(self) -> "ConstantIntrospector":
        return self._check(lambda c: c.visibility == "protected", "protected")

    def where_private(self) -> "ConstantIntrospector":
        return self._check(lambda c: c.visibility == "private", "private")

    def where_final(self) -> "ConstantIntrospector":
        return self._check(lambda c: c.final, "final")

    def where_has_attribute(self, kind: Any) -> "ConstantIntrospector":
        return self._check(
            lambda c: any(reflection.attribute_matches(a, kind) for a in c.attributes),
            f"has attribute {reflection.qualified_name(kind)}",
        )

    def _matches(self) -> List[ConstantInfo]:
        return [
            info
            for info in constants(self.target)
            if all(check(info) for check in self._checks)
        ]

    def all(self) -> Dict[str, Any]:
        """Matching constants mapped to their values."""
        return {info.name: info.value for info in self._matches()}

    def names(self) -> List[str]:
        return [info.name for info in self._matches()]

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """Details of one constant, ignoring checks; ``None`` if undefined."""
        for info in constants(self.target):
            if info.name == name:
                return info.to_dict()
        return None

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {info.name: info.to_dict() for info in self._matches()}
