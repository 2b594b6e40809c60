"""Single-entity introspectors.

Each introspector wraps one target (a class, instance, enum, method,
callable, job or model) and raises
:class:`~fluent_introspect.exceptions.InvalidTargetError` at construction
when the target is unusable.
"""

from .callable import CallableIntrospector
from .class_ import ClassIntrospector
from .constant import ConstantIntrospector
from .enum import EnumIntrospector
from .instance import InstanceIntrospector
from .job import JobIntrospector
from .method import MethodIntrospector
from .model import ModelIntrospector

__all__ = [
    "CallableIntrospector",
    "ClassIntrospector",
    "ConstantIntrospector",
    "EnumIntrospector",
    "InstanceIntrospector",
    "JobIntrospector",
    "MethodIntrospector",
    "ModelIntrospector",
]
