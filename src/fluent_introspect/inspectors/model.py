"""Introspection of a single pydantic model."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .. import orm, reflection
from ..exceptions import InvalidTargetError

logger = logging.getLogger(__name__)


class ModelIntrospector:
    """Inspect one pydantic model class.

    See :mod:`fluent_introspect.orm` for how model declarations map to
    fillable, hidden, appended, guarded and relationship metadata.

    Example:
        model = Introspect.model("app.models.User")
        model.fillable()        # ["id", "email", "password"]
        model.hidden()          # ["password"]
        model.relationships()   # {"posts": {"type": "has_many", ...}}

    Raises:
        InvalidTargetError: If the target is not a pydantic model class
    """

    def __init__(self, target: Any):
        cls = reflection.resolve_class(target)
        if cls is None or not orm.is_model(cls):
            raise InvalidTargetError(
                "Expected a pydantic model class",
                target=target,
                suggestions=["Pass a pydantic.BaseModel subclass or its dotted path"],
            )
        self.cls = cls

    def properties(self) -> Dict[str, Any]:
        return {
            "fillable": self.fillable(),
            "hidden": self.hidden(),
            "appended": self.appended(),
            "casts": self.casts(),
        }

    def fillable(self) -> List[str]:
        return orm.fillable(self.cls)

    def hidden(self) -> List[str]:
        return orm.hidden(self.cls)

    def appended(self) -> List[str]:
        return orm.appended(self.cls)

    def guarded(self) -> List[str]:
        return orm.guarded(self.cls)

    def casts(self) -> Dict[str, Optional[str]]:
        return orm.casts(self.cls)

    def relationships(self) -> Dict[str, Dict[str, Any]]:
        return orm.relationships(self.cls)

    def table(self) -> str:
        return orm.table(self.cls)

    def primary_key(self) -> str:
        return orm.primary_key(self.cls)

    def connection(self) -> Optional[str]:
        return orm.connection(self.cls)

    def uses_timestamps(self) -> bool:
        return orm.uses_timestamps(self.cls)

    def uses_soft_deletes(self) -> bool:
        return orm.uses_soft_deletes(self.cls)

    def accessors(self) -> List[str]:
        return orm.accessors(self.cls)

    def mutators(self) -> List[str]:
        return orm.mutators(self.cls)

    def validators(self) -> Dict[str, List[str]]:
        return orm.validators(self.cls)

    def schema(self) -> Dict[str, Any]:
        """Flat structural summary of the model.

        Fields come first (typed by their cast), then appended computed
        fields typed ``"computed"``.
        """
        hidden = set(self.hidden())
        properties: Dict[str, Dict[str, Any]] = {}
        for name, cast in self.casts().items():
            properties[name] = {
                "type": cast or "Any",
                "fillable": True,
                "hidden": name in hidden,
            }
        for name in self.appended():
            properties[name] = {
                "type": "computed",
                "fillable": False,
                "hidden": False,
                "appended": True,
            }
        return {
            "type": "model",
            "class": reflection.qualified_name(self.cls),
            "table": self.table(),
            "primary_key": self.primary_key(),
            "properties": properties,
            "relationships": self.relationships(),
        }

    def json_schema(self) -> Optional[Dict[str, Any]]:
        """Pydantic's JSON schema for the model, or ``None`` if it cannot be built."""
        try:
            return self.cls.model_json_schema()
        except Exception as e:
            logger.debug(f"No JSON schema for {reflection.qualified_name(self.cls)}: {e}")
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": reflection.qualified_name(self.cls),
            "namespace": reflection.class_namespace(self.cls),
            "short_name": reflection.class_basename(self.cls),
            "table": self.table(),
            "primary_key": self.primary_key(),
            "connection": self.connection(),
            "timestamps": self.uses_timestamps(),
            "soft_deletes": self.uses_soft_deletes(),
            "fillable": self.fillable(),
            "guarded": self.guarded(),
            "hidden": self.hidden(),
            "appended": self.appended(),
            "casts": self.casts(),
            "relationships": self.relationships(),
            "accessors": self.accessors(),
            "mutators": self.mutators(),
            "validators": self.validators(),
            "schema": self.schema(),
        }
