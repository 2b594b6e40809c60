"""Queued job metadata.

Job settings are read from class-level defaults without running the job's
``__init__``. A setting provided by a method instead (``via_queue()``,
``tries()``...) depends on runtime state and is reported as ``None``:
"cannot be determined statically", not "not configured".
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .. import reflection
from ..contracts import ShouldBeEncrypted, ShouldBeUnique
from ..exceptions import InvalidTargetError
from ..registries import middleware_name

logger = logging.getLogger(__name__)

# setting -> method that makes it dynamic
_DYNAMIC_VIA = {"queue": "via_queue", "connection": "via_connection"}


def class_default(cls: type, name: str, kinds: Union[type, Tuple[type, ...]]) -> Any:
    """Class-level default for a job setting, or ``None``.

    ``None`` covers: not declared, provided by a method, or of the wrong type.
    """
    try:
        value = inspect.getattr_static(cls, name)
    except AttributeError:
        via = _DYNAMIC_VIA.get(name)
        if via and reflection.has_method(cls, via):
            logger.debug(f"{reflection.qualified_name(cls)}.{name} is provided by {via}()")
        return None
    if callable(value) or isinstance(value, (staticmethod, classmethod, property)):
        logger.debug(f"{reflection.qualified_name(cls)}.{name} is computed at runtime")
        return None
    # bool is an int subclass but never a count
    if isinstance(value, bool) and bool not in _as_tuple(kinds):
        return None
    return value if isinstance(value, kinds) else None


def _as_tuple(kinds: Union[type, Tuple[type, ...]]) -> Tuple[type, ...]:
    return kinds if isinstance(kinds, tuple) else (kinds,)


def queue(cls: type) -> Optional[str]:
    return class_default(cls, "queue", str)


def connection(cls: type) -> Optional[str]:
    return class_default(cls, "connection", str)


def tries(cls: type) -> Optional[int]:
    return class_default(cls, "tries", int)


def timeout(cls: type) -> Optional[int]:
    return class_default(cls, "timeout", int)


def max_exceptions(cls: type) -> Optional[int]:
    return class_default(cls, "max_exceptions", int)


def backoff(cls: type) -> Union[int, List[int], None]:
    value = class_default(cls, "backoff", (int, list, tuple))
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def fail_on_timeout(cls: type) -> bool:
    return class_default(cls, "fail_on_timeout", bool) is True


def delete_when_missing_models(cls: type) -> bool:
    return class_default(cls, "delete_when_missing_models", bool) is True


def is_unique(cls: Any) -> bool:
    return reflection.implements_interface(cls, ShouldBeUnique)


def is_encrypted(cls: Any) -> bool:
    return reflection.implements_interface(cls, ShouldBeEncrypted)


def _bare_instance(cls: type) -> Optional[Any]:
    """An instance created without running ``__init__``."""
    try:
        return cls.__new__(cls)
    except Exception as e:
        logger.debug(f"Cannot allocate {reflection.qualified_name(cls)}: {e}")
        return None


def middleware(cls: type) -> List[Any]:
    """Result of the job's ``middleware()`` method, or ``[]``.

    The method runs on an instance whose ``__init__`` was skipped; if it
    needs constructor state it fails and the job reports no middleware.
    """
    if not reflection.has_method(cls, "middleware"):
        return []
    instance = _bare_instance(cls)
    if instance is None:
        return []
    try:
        result = instance.middleware()
    except Exception as e:
        logger.debug(f"{reflection.qualified_name(cls)}.middleware() failed: {e}")
        return []
    if result is None:
        return []
    if isinstance(result, (list, tuple)):
        return list(result)
    return [result]


def unique_id(cls: type) -> Optional[str]:
    if not is_unique(cls) or not reflection.has_method(cls, "unique_id"):
        return None
    instance = _bare_instance(cls)
    if instance is None:
        return None
    try:
        value = instance.unique_id()
    except Exception as e:
        logger.debug(f"{reflection.qualified_name(cls)}.unique_id() failed: {e}")
        return None
    return value if isinstance(value, str) else None


def summary(cls: type) -> Dict[str, Any]:
    """The settings a jobs listing shows for one job."""
    return {
        "class": reflection.qualified_name(cls),
        "queue": queue(cls),
        "connection": connection(cls),
        "tries": tries(cls),
        "backoff": backoff(cls),
        "middleware": [middleware_name(m) for m in middleware(cls)],
        "unique": is_unique(cls),
        "encrypted": is_encrypted(cls),
    }


class JobIntrospector:
    """Inspect one queued job class.

    Example:
        job = Introspect.job("app.jobs.SendInvoice")
        job.queue()      # "billing"
        job.tries()      # 3
        job.to_dict()

    Raises:
        InvalidTargetError: If the class cannot be resolved or is not instantiable
    """

    def __init__(self, job: Union[str, Type[Any]]):
        cls = reflection.resolve_class(job)
        if cls is None:
            raise InvalidTargetError(
                "Job class not found",
                target=job,
                suggestions=["Pass the class itself or its dotted path"],
            )
        if not reflection.is_instantiable(cls):
            raise InvalidTargetError(
                f"Class {reflection.qualified_name(cls)} is not instantiable",
                target=job,
            )
        self.cls = cls

    def queue(self) -> Optional[str]:
        return queue(self.cls)

    def connection(self) -> Optional[str]:
        return connection(self.cls)

    def tries(self) -> Optional[int]:
        return tries(self.cls)

    def timeout(self) -> Optional[int]:
        return timeout(self.cls)

    def backoff(self) -> Union[int, List[int], None]:
        return backoff(self.cls)

    def max_exceptions(self) -> Optional[int]:
        return max_exceptions(self.cls)

    def fail_on_timeout(self) -> bool:
        return fail_on_timeout(self.cls)

    def delete_when_missing_models(self) -> bool:
        return delete_when_missing_models(self.cls)

    def middleware(self) -> List[Any]:
        return middleware(self.cls)

    def is_unique(self) -> bool:
        return is_unique(self.cls)

    def is_encrypted(self) -> bool:
        return is_encrypted(self.cls)

    def unique_id(self) -> Optional[str]:
        return unique_id(self.cls)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": reflection.qualified_name(self.cls),
            "namespace": reflection.class_namespace(self.cls),
            "short_name": reflection.class_basename(self.cls),
            "queue": self.queue(),
            "connection": self.connection(),
            "tries": self.tries(),
            "timeout": self.timeout(),
            "backoff": self.backoff(),
            "max_exceptions": self.max_exceptions(),
            "fail_on_timeout": self.fail_on_timeout(),
            "delete_when_missing_models": self.delete_when_missing_models(),
            "middleware": [middleware_name(m) for m in self.middleware()],
            "unique": self.is_unique(),
            "encrypted": self.is_encrypted(),
            "unique_id": self.unique_id(),
        }
