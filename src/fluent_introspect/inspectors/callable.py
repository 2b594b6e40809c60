"""Introspection of arbitrary callables."""

from __future__ import annotations

import inspect
import logging
import pkgutil
import sys
import types
from typing import Any, Dict, List, Optional, Tuple

from .. import reflection
from ..exceptions import InvalidTargetError
from .method import parameter_details

logger = logging.getLogger(__name__)


class CallableIntrospector:
    """Inspect a function, lambda, bound method or invokable object.

    Accepted targets:

    - functions and lambdas;
    - bound methods (``service.handle``, ``Model.create`` for class methods);
    - objects defining ``__call__``;
    - ``(cls, "method")`` tuples;
    - dotted paths (``"app.tasks.send"``, ``"app.Service.handle"``).

    The implicit ``self``/``cls`` argument is never reported.

    Raises:
        InvalidTargetError: If the target is not callable or cannot be resolved
    """

    def __init__(self, target: Any):
        self.target = target
        self.function, self.owner, self.static, self.bound = self._resolve(target)

    def _resolve(self, target: Any) -> Tuple[Any, Optional[type], bool, bool]:
        """Return ``(function, owning class, is static, drops first argument)``."""
        if isinstance(target, str):
            try:
                target = pkgutil.resolve_name(target)
            except Exception as e:
                raise InvalidTargetError(
                    "Callable not found", target=self.target, context={"error": str(e)}
                ) from e
        if inspect.isfunction(target) and "<locals>" not in target.__qualname__:
            # "Service.handle" looked up on the class: inspect it as a method
            cls = _enclosing_class(target)
            if cls is not None and reflection.has_method(cls, target.__name__):
                target = (cls, target.__name__)
        if isinstance(target, tuple) and len(target) == 2:
            cls, name = target
            cls = reflection.resolve_class(cls)
            if cls is None or not reflection.has_method(cls, name):
                raise InvalidTargetError("Method not found", target=repr(self.target))
            raw = reflection.raw_member(cls, name)
            if isinstance(raw, staticmethod):
                return raw.__func__, cls, True, False
            if isinstance(raw, classmethod):
                return raw.__func__, cls, True, True
            return raw, cls, False, True
        if isinstance(target, types.MethodType):
            owner = target.__self__
            if isinstance(owner, type):
                return target.__func__, owner, True, True
            return target.__func__, type(owner), False, True
        if inspect.isfunction(target) or inspect.isbuiltin(target):
            return target, None, False, False
        if callable(target) and not isinstance(target, type):
            call = reflection.raw_member(type(target), "__call__")
            if inspect.isfunction(call):
                return call, type(target), False, True
        raise InvalidTargetError(
            "Target is not an inspectable callable",
            target=repr(self.target),
            suggestions=["Pass a function, a bound method, an object with __call__, or (cls, 'method')"],
        )

    def _signature(self) -> Optional[inspect.Signature]:
        try:
            signature = inspect.signature(self.function)
        except (TypeError, ValueError) as e:
            logger.debug(f"No signature for {self.function!r}: {e}")
            return None
        if self.bound:
            params = list(signature.parameters.values())[1:]
            signature = signature.replace(parameters=params)
        return signature

    def parameters(self) -> List[Dict[str, Any]]:
        signature = self._signature()
        return parameter_details(signature) if signature is not None else []

    def return_type(self) -> Optional[str]:
        signature = self._signature()
        if signature is None:
            return None
        return reflection.format_type(signature.return_annotation)

    def bound_variables(self) -> Dict[str, Any]:
        """Variables a closure captured from its enclosing scopes."""
        if not inspect.isfunction(self.function) or not self.function.__closure__:
            return {}
        try:
            return dict(inspect.getclosurevars(self.function).nonlocals)
        except (TypeError, ValueError) as e:
            logger.debug(f"Cannot read closure of {self.function!r}: {e}")
            return {}

    def scope_class(self) -> Optional[str]:
        """Class the callable was defined in, if any."""
        if self.owner is not None:
            return reflection.qualified_name(self.owner)
        cls = _enclosing_class(self.function)
        return reflection.qualified_name(cls) if cls is not None else None

    def is_static(self) -> bool:
        return self.static

    def source_file(self) -> Optional[str]:
        try:
            return inspect.getsourcefile(self.function)
        except TypeError:
            return None

    def source_lines(self) -> Optional[Tuple[int, int]]:
        """First and last source line, or ``None`` without source."""
        try:
            lines, start = inspect.getsourcelines(self.function)
        except (OSError, TypeError):
            return None
        return start, start + len(lines) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": self.parameters(),
            "return_type": self.return_type(),
            "bound_variables": self.bound_variables(),
            "scope_class": self.scope_class(),
            "is_static": self.is_static(),
            "source_file": self.source_file(),
            "source_lines": self.source_lines(),
        }


def _enclosing_class(function: Any) -> Optional[type]:
    """The class whose body encloses ``function``, read from its qualname."""
    qualname = getattr(function, "__qualname__", "")
    module = sys.modules.get(getattr(function, "__module__", None) or "")
    path = qualname.split(".<locals>", 1)[0].split(".")[:-1]
    if module is None or not path:
        return None
    obj: Any = module
    for part in path:
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj if isinstance(obj, type) else None
