"""Model metadata for pydantic models.

Maps the persistence vocabulary the model queries speak (fillable, hidden,
appended, guarded, relationships, table) onto what a pydantic model declares:

============  =========================================================
fillable      declared fields
hidden        fields declared with ``exclude=True``
appended      ``@computed_field`` properties
guarded       frozen fields, or ``["*"]`` for a frozen model
casts         field name -> normalised type string
relationship  a field whose type refers to another model
============  =========================================================

Table name, primary key and connection come from the optional
``__tablename__``, ``__primary_key__`` and ``__connection__`` class
attributes.
"""

from __future__ import annotations

import logging
import re
import types
import typing
from collections.abc import Sequence as AbcSequence
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from . import reflection

logger = logging.getLogger(__name__)

_MANY = (list, tuple, set, frozenset, AbcSequence)

TIMESTAMP_FIELDS = ("created_at", "updated_at")
SOFT_DELETE_FIELD = "deleted_at"


def is_model(target: Any) -> bool:
    """True for concrete pydantic model classes (not ``BaseModel`` itself)."""
    cls = reflection.class_of(target)
    if cls is None or cls is BaseModel:
        return False
    try:
        if not issubclass(cls, BaseModel):
            return False
    except TypeError:
        return False
    # Model[int] style parametrisations are views of the generic model
    metadata = getattr(cls, "__pydantic_generic_metadata__", None) or {}
    return metadata.get("origin") is None


def fields(model: type) -> Dict[str, Any]:
    return dict(getattr(model, "__pydantic_fields__", None) or {})


def computed_fields(model: type) -> Dict[str, Any]:
    return dict(getattr(model, "__pydantic_computed_fields__", None) or {})


def fillable(model: type) -> List[str]:
    return list(fields(model))


def hidden(model: type) -> List[str]:
    return [name for name, info in fields(model).items() if info.exclude is True]


def appended(model: type) -> List[str]:
    return list(computed_fields(model))


def is_frozen_model(model: type) -> bool:
    config = getattr(model, "model_config", None) or {}
    return bool(config.get("frozen"))


def guarded(model: type) -> List[str]:
    if is_frozen_model(model):
        return ["*"]
    return [name for name, info in fields(model).items() if info.frozen]


def casts(model: type) -> Dict[str, Optional[str]]:
    return {name: reflection.format_type(info.annotation) for name, info in fields(model).items()}


def _properties(model: type) -> Dict[str, property]:
    found: Dict[str, property] = {}
    for klass in model.__mro__:
        if klass is BaseModel:
            break
        for name, value in vars(klass).items():
            if isinstance(value, property) and name not in found:
                found[name] = value
    return found


def readable(model: type, name: str) -> bool:
    """Fields, computed fields and public properties can be read."""
    if name in fields(model) or name in computed_fields(model):
        return True
    return name in _properties(model) and reflection.visibility(name) == "public"


def writable(model: type, name: str) -> bool:
    """Non-frozen fields and properties with a setter can be written."""
    info = fields(model).get(name)
    if info is not None:
        return not info.frozen and not is_frozen_model(model)
    prop = _properties(model).get(name)
    return prop is not None and prop.fset is not None and reflection.visibility(name) == "public"


def _model_in(annotation: Any) -> Optional[type]:
    if isinstance(annotation, type) and is_model(annotation):
        return annotation
    for arg in typing.get_args(annotation):
        found = _model_in(arg)
        if found is not None:
            return found
    return None


def _is_many(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(_is_many(arg) for arg in typing.get_args(annotation))
    if origin is typing.Annotated:
        return _is_many(typing.get_args(annotation)[0])
    return isinstance(origin, type) and issubclass(origin, _MANY)


def relationships(model: type) -> Dict[str, Dict[str, Any]]:
    """Fields that refer to other models.

    A heuristic over the field annotation: a collection of models is
    ``has_many``, anything else containing a model is ``has_one``.
    """
    found: Dict[str, Dict[str, Any]] = {}
    for name, info in fields(model).items():
        related = _model_in(info.annotation)
        if related is None:
            continue
        found[name] = {
            "type": "has_many" if _is_many(info.annotation) else "has_one",
            "related": reflection.qualified_name(related),
        }
    return found


def has_relationship(model: type, name: str) -> bool:
    return name in relationships(model)


def table(model: type) -> str:
    explicit = getattr(model, "__tablename__", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", model.__name__).lower()
    if snake.endswith("y") and not snake.endswith(("ay", "ey", "oy", "uy")):
        return snake[:-1] + "ies"
    if snake.endswith(("s", "x", "ch", "sh")):
        return snake + "es"
    return snake + "s"


def primary_key(model: type) -> str:
    key = getattr(model, "__primary_key__", None)
    return key if isinstance(key, str) and key else "id"


def connection(model: type) -> Optional[str]:
    value = getattr(model, "__connection__", None)
    return value if isinstance(value, str) else None


def uses_timestamps(model: type) -> bool:
    declared = fields(model)
    return all(name in declared for name in TIMESTAMP_FIELDS)


def uses_soft_deletes(model: type) -> bool:
    return SOFT_DELETE_FIELD in fields(model)


def accessors(model: type) -> List[str]:
    """Computed fields and plain properties."""
    names = appended(model)
    for name in _properties(model):
        if name not in names:
            names.append(name)
    return names


def mutators(model: type) -> List[str]:
    """Fields transformed by a ``field_validator`` before assignment."""
    decorators = getattr(model, "__pydantic_decorators__", None)
    if decorators is None:
        return []
    found: Dict[str, None] = {}
    for decorator in decorators.field_validators.values():
        for name in decorator.info.fields:
            found.setdefault(name, None)
    return list(found)


def validators(model: type) -> Dict[str, List[str]]:
    """Validator method names by kind (``field`` and ``model``)."""
    decorators = getattr(model, "__pydantic_decorators__", None)
    if decorators is None:
        return {"field": [], "model": []}
    return {
        "field": list(decorators.field_validators),
        "model": list(decorators.model_validators),
    }
