"""Introspection of a single method."""

from __future__ import annotations

import dataclasses
import inspect
import logging
from typing import Any, Dict, List, Optional

from .. import docstrings, reflection
from ..exceptions import InvalidTargetError

logger = logging.getLogger(__name__)


def parameter_details(signature: inspect.Signature) -> List[Dict[str, Any]]:
    """Per-parameter details in declaration order."""
    details = []
    for position, param in enumerate(signature.parameters.values()):
        info = reflection.parameter_info(param)
        details.append(
            {
                "name": info["name"],
                "type": info["type"],
                "default": info["default"],
                "has_default": info["has_default"],
                "is_variadic": info["is_variadic"],
                "is_optional": info["has_default"] or info["is_variadic"],
                "position": position,
                "kind": info["kind"],
            }
        )
    return details


def attribute_details(instance: Any) -> Dict[str, Any]:
    """An attached metadata instance as ``{"name", "arguments"}``."""
    if dataclasses.is_dataclass(instance) and not isinstance(instance, type):
        arguments = {f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)}
    else:
        arguments = dict(getattr(instance, "__dict__", {}))
    return {"name": reflection.qualified_name(type(instance)), "arguments": arguments}


class MethodIntrospector:
    """Inspect one method of a class.

    ``self`` (and ``cls`` for class methods) is not reported as a parameter.

    Example:
        method = Introspect.method(UserService, "create")
        method.parameters()
        method.return_type()   # "?app.models.User"

    Raises:
        InvalidTargetError: If the class or the method does not exist
    """

    def __init__(self, target: Any, name: str):
        cls = reflection.class_of(target)
        if cls is None:
            raise InvalidTargetError("Class not found", target=target)
        raw = reflection.raw_member(cls, name)
        if not reflection.has_method(cls, name):
            raise InvalidTargetError(
                "Method not found",
                context={"class": reflection.qualified_name(cls), "method": name},
                suggestions=[f"Available: {', '.join(n for n, _, _ in reflection.methods(cls))}"],
            )
        self.cls = cls
        self.name = name
        self.raw = raw
        self.function = raw.__func__ if isinstance(raw, (staticmethod, classmethod)) else raw

    def _signature(self) -> Optional[inspect.Signature]:
        try:
            signature = inspect.signature(self.function)
        except (TypeError, ValueError) as e:
            logger.debug(f"No signature for {self.cls.__name__}.{self.name}: {e}")
            return None
        if isinstance(self.raw, staticmethod):
            return signature
        params = list(signature.parameters.values())[1:]
        return signature.replace(parameters=params)

    def parameters(self) -> List[Dict[str, Any]]:
        signature = self._signature()
        return parameter_details(signature) if signature is not None else []

    def return_type(self) -> Optional[str]:
        signature = self._signature()
        if signature is None:
            return None
        return reflection.format_type(signature.return_annotation)

    def visibility(self) -> str:
        return reflection.visibility(self.name)

    def is_static(self) -> bool:
        """Static and class methods need no instance."""
        return isinstance(self.raw, (staticmethod, classmethod))

    def is_final(self) -> bool:
        return reflection.is_final(self.raw)

    def is_abstract(self) -> bool:
        return bool(getattr(self.function, "__isabstractmethod__", False))

    def attributes(self) -> List[Dict[str, Any]]:
        return [attribute_details(a) for a in reflection.get_attributes(self.function)]

    def docstring(self) -> Dict[str, Any]:
        parsed = docstrings.parse(inspect.getdoc(self.function))
        if parsed is None:
            return {"description": None, "params": {}, "returns": None, "raises": {}}
        return parsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "class": reflection.qualified_name(self.cls),
            "visibility": self.visibility(),
            "is_static": self.is_static(),
            "is_final": self.is_final(),
            "is_abstract": self.is_abstract(),
            "parameters": self.parameters(),
            "return_type": self.return_type(),
            "attributes": self.attributes(),
            "docstring": self.docstring(),
        }
