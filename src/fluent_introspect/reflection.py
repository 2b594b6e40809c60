"""Reflection capability layer.

Thin, best-effort wrappers over :mod:`inspect` and the class MRO. Every
function accepts a class, an instance, or a dotted qualified name and degrades
to a neutral result (``False``, ``None``, empty list) when the target cannot
be resolved. Builders compose these checks into filter predicates.

Python has no first-class interfaces or traits, so both are derived from the
class hierarchy:

- an *interface* is an ABC whose own members are all abstract, or a
  ``typing.Protocol`` class;
- the *parent chain* follows the primary base, the last base class that is
  not an interface (mixins conventionally go to the left);
- a *trait* is any other non-interface base in the parent chain, together
  with the bases that mixin itself inherits.
"""

from __future__ import annotations

import abc
import dataclasses
import enum
import inspect
import logging
import pkgutil
import types
import typing
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .attributes import attached

logger = logging.getLogger(__name__)

# Classes that shape the hierarchy without meaning anything to callers
_PLUMBING = frozenset({object, abc.ABC, typing.Protocol, typing.Generic})

# Bookkeeping the abc and typing machinery stores on every class
_INTERNAL_NAMES = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})

_EMPTY = inspect.Parameter.empty


# ----------------------------------------------------------------------------
# Names and resolution
# ----------------------------------------------------------------------------


def resolve_class(target: Any) -> Optional[type]:
    """Resolve a class object or dotted name to a class, or ``None``."""
    if isinstance(target, type):
        return target
    if not isinstance(target, str) or not target:
        return None
    try:
        obj = pkgutil.resolve_name(target)
    except Exception as e:
        logger.debug(f"Cannot resolve class {target!r}: {e}")
        return None
    return obj if isinstance(obj, type) else None


def class_of(target: Any) -> Optional[type]:
    """Class of ``target``: names are resolved, instances give their type."""
    if isinstance(target, (type, str)):
        return resolve_class(target)
    if target is None:
        return None
    return type(target)


def qualified_name(target: Any) -> str:
    """Dotted ``module.QualName`` for a class, function or instance.

    Strings are returned unchanged; builtins drop the ``builtins.`` prefix.
    """
    if isinstance(target, str):
        return target
    if not isinstance(target, type) and not callable_with_name(target):
        target = type(target)
    module = getattr(target, "__module__", None)
    name = getattr(target, "__qualname__", None) or getattr(target, "__name__", repr(target))
    if not module or module == "builtins":
        return name
    return f"{module}.{name}"


def callable_with_name(obj: Any) -> bool:
    return isinstance(
        obj, (types.FunctionType, types.BuiltinFunctionType, types.MethodType)
    )


def class_basename(target: Any) -> str:
    """Short class name without the module (``app.models.User`` -> ``User``)."""
    cls = class_of(target)
    if cls is not None:
        return cls.__name__
    return str(target).rsplit(".", 1)[-1]


def class_namespace(target: Any) -> str:
    """Module a class is defined in (``app.models.User`` -> ``app.models``)."""
    cls = class_of(target)
    if cls is not None:
        return cls.__module__ or ""
    name = str(target)
    return name.rsplit(".", 1)[0] if "." in name else ""


# ----------------------------------------------------------------------------
# Hierarchy: parents, interfaces, traits
# ----------------------------------------------------------------------------


def is_interface(target: Any) -> bool:
    """True for protocols and for ABCs whose own members are all abstract.

    An ABC that defines a constructor or any concrete method is an abstract
    class, not an interface. An ABC adding no members of its own is an
    interface when all of its bases are.
    """
    cls = resolve_class(target)
    if cls is None or cls in _PLUMBING:
        return False
    if getattr(cls, "_is_protocol", False):
        return True
    if not isinstance(cls, abc.ABCMeta) or not getattr(cls, "__abstractmethods__", None):
        return False
    own = [
        value
        for name, value in vars(cls).items()
        if (name == "__init__" or not is_magic(name))
        and (_is_method_like(value) or isinstance(value, property))
    ]
    if own:
        return all(getattr(value, "__isabstractmethod__", False) for value in own)
    bases = [base for base in cls.__bases__ if base not in _PLUMBING]
    return bool(bases) and all(is_interface(base) for base in bases)


def primary_base(cls: type) -> Optional[type]:
    """The base continuing the parent chain, or ``None`` at the root."""
    candidates = [
        base for base in cls.__bases__ if base not in _PLUMBING and not is_interface(base)
    ]
    return candidates[-1] if candidates else None


def parent_classes(target: Any) -> List[type]:
    """Parent chain from the direct parent up to (not including) ``object``."""
    cls = class_of(target)
    parents: List[type] = []
    while cls is not None:
        cls = primary_base(cls)
        if cls is not None:
            parents.append(cls)
    return parents


def extends_class(target: Any, parent: Any) -> bool:
    """True when ``parent`` is a strict ancestor of ``target``."""
    cls = class_of(target)
    base = resolve_class(parent)
    if cls is None or base is None or cls is base:
        return False
    return base in cls.__mro__


def interfaces(target: Any) -> List[type]:
    """All interfaces in the class's MRO, nearest first."""
    cls = class_of(target)
    if cls is None:
        return []
    return [base for base in cls.__mro__[1:] if is_interface(base)]


def direct_interfaces(target: Any) -> List[type]:
    """Interfaces not already implemented by the parent class."""
    cls = class_of(target)
    if cls is None:
        return []
    parent = primary_base(cls)
    inherited = set(interfaces(parent)) if parent is not None else set()
    return [iface for iface in interfaces(cls) if iface not in inherited]


def implements_interface(target: Any, interface: Any) -> bool:
    """True when ``target`` declares (or registers for) ``interface``."""
    cls = class_of(target)
    iface = resolve_class(interface)
    if cls is None or iface is None or cls is iface or not is_interface(iface):
        return False
    if iface in cls.__mro__:
        return True
    if getattr(iface, "_is_protocol", False):
        # structural protocol checks are not declarations
        return False
    try:
        return issubclass(cls, iface)
    except TypeError as e:
        logger.debug(f"issubclass({cls!r}, {iface!r}) failed: {e}")
        return False


def direct_traits(cls: type) -> List[type]:
    """Mixins named directly in the class statement."""
    parent = primary_base(cls)
    return [
        base
        for base in cls.__bases__
        if base is not parent and base not in _PLUMBING and not is_interface(base)
    ]


def all_traits(target: Any) -> List[type]:
    """Mixins used by the class, its parents, and the mixins themselves."""
    cls = class_of(target)
    if cls is None:
        return []
    found: Dict[type, None] = {}
    for klass in [cls, *parent_classes(cls)]:
        for trait in direct_traits(klass):
            for member in trait.__mro__:
                if member in _PLUMBING or is_interface(member):
                    continue
                found.setdefault(member, None)
    return list(found)


def uses_trait(target: Any, trait: Any) -> bool:
    mixin = resolve_class(trait)
    if mixin is None:
        return False
    return mixin in all_traits(target)


def uses_traits(target: Any, *traits: Any) -> bool:
    return all(uses_trait(target, trait) for trait in traits)


def uses_any_trait(target: Any, *traits: Any) -> bool:
    return any(uses_trait(target, trait) for trait in traits)


# ----------------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------------


def visibility(name: str) -> str:
    """Visibility by naming convention: public, protected or private."""
    if is_magic(name):
        return "public"
    # "__x" as written, or "_Owner__x" after name mangling
    if name.startswith("__") or (name.startswith("_") and "__" in name.lstrip("_")):
        return "private"
    if name.startswith("_"):
        return "protected"
    return "public"


def is_magic(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_method_like(value: Any) -> bool:
    return (
        isinstance(value, (staticmethod, classmethod))
        or inspect.isfunction(value)
        or inspect.ismethoddescriptor(value)
        or inspect.isbuiltin(value)
    ) and not isinstance(value, property)


def _own_members(cls: type) -> Iterator[Tuple[str, Any, type]]:
    """Yield ``(name, raw value, owner)`` across the MRO, nearest first."""
    seen = set()
    for klass in cls.__mro__:
        if klass in _PLUMBING:
            continue
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            yield name, value, klass


def raw_member(target: Any, name: str) -> Any:
    """Static lookup of a class member (no descriptor binding), or ``_EMPTY``."""
    cls = class_of(target)
    if cls is None:
        return _EMPTY
    try:
        return inspect.getattr_static(cls, name)
    except AttributeError:
        return _EMPTY


def methods(target: Any) -> List[Tuple[str, Any, type]]:
    """All methods as ``(name, raw value, declaring class)``, declaration order."""
    cls = class_of(target)
    if cls is None:
        return []
    return [member for member in _own_members(cls) if _is_method_like(member[1])]


def public_methods(target: Any) -> List[str]:
    """Public method names (magic methods excluded)."""
    return [
        name
        for name, _, _ in methods(target)
        if not is_magic(name) and visibility(name) == "public"
    ]


def static_methods(target: Any) -> List[str]:
    return [
        name
        for name, value, _ in methods(target)
        if isinstance(value, (staticmethod, classmethod)) and not is_magic(name)
    ]


def has_method(target: Any, name: str) -> bool:
    return _is_method_like(raw_member(target, name))


def method_is_public(target: Any, name: str) -> bool:
    return has_method(target, name) and visibility(name) == "public"


def annotations_of(klass: type) -> Dict[str, Any]:
    """Annotations declared on one class, without evaluating strings."""
    try:
        return dict(inspect.get_annotations(klass))
    except Exception as e:
        logger.debug(f"Cannot read annotations of {klass!r}: {e}")
        return {}


def is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.split("[", 1)[0].rsplit(".", 1)[-1] == "ClassVar"
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _property_members(cls: type) -> Dict[str, bool]:
    """Property names mapped to whether they are static (class-level)."""
    found: Dict[str, bool] = {}
    for klass in cls.__mro__:
        if klass in _PLUMBING:
            continue
        for name, annotation in annotations_of(klass).items():
            found.setdefault(name, is_class_var(annotation))
    for name, value, _ in _own_members(cls):
        if name in found or is_magic(name) or name in _INTERNAL_NAMES:
            continue
        if isinstance(value, property):
            found[name] = False
        elif not _is_method_like(value) and not isinstance(value, type):
            found[name] = True
    return {name: static for name, static in found.items() if not is_magic(name)}


def property_names(target: Any) -> List[str]:
    """Every property name, any visibility; instances include their own state."""
    cls = class_of(target)
    if cls is None:
        return []
    names = list(_property_members(cls))
    if not isinstance(target, (type, str)):
        for name in getattr(target, "__dict__", {}):
            if name not in names and not is_magic(name):
                names.append(name)
    return names


def public_properties(target: Any) -> List[str]:
    return [name for name in property_names(target) if visibility(name) == "public"]


def static_properties(target: Any) -> List[str]:
    cls = class_of(target)
    if cls is None:
        return []
    return [name for name, static in _property_members(cls).items() if static]


def has_property(target: Any, name: str) -> bool:
    return name in property_names(target)


def get_attributes(target: Any, kind: Any = None) -> List[Any]:
    """Metadata instances attached with ``@attribute``, optionally by type."""
    holder = target if callable_with_name(target) else class_of(target)
    if holder is None:
        return []
    found = list(attached(holder))
    if kind is None:
        return found
    return [instance for instance in found if attribute_matches(instance, kind)]


def attribute_matches(instance: Any, kind: Any) -> bool:
    cls = resolve_class(kind)
    if cls is not None:
        return isinstance(instance, cls)
    return qualified_name(type(instance)) == kind


def has_attribute(target: Any, kind: Any) -> bool:
    return bool(get_attributes(target, kind))


# ----------------------------------------------------------------------------
# Class flags and constructors
# ----------------------------------------------------------------------------


def is_abstract(target: Any) -> bool:
    cls = class_of(target)
    if cls is None:
        return False
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def is_concrete(target: Any) -> bool:
    cls = class_of(target)
    return cls is not None and not is_abstract(cls)


def is_instantiable(target: Any) -> bool:
    cls = class_of(target)
    if cls is None or is_abstract(cls):
        return False
    return not issubclass(cls, enum.Enum)


def is_final(obj: Any) -> bool:
    """``typing.final`` marker on a class or method."""
    if isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    return getattr(obj, "__final__", False) is True


def constructor(target: Any) -> Optional[Any]:
    """The nearest ``__init__`` defined below ``object``, or ``None``."""
    cls = class_of(target)
    if cls is None:
        return None
    for klass in cls.__mro__:
        if klass is object:
            break
        if klass in _PLUMBING or getattr(klass, "_is_protocol", False):
            # protocols install a placeholder __init__
            continue
        if "__init__" in vars(klass):
            return vars(klass)["__init__"]
    return None


def declared_fields(cls: type) -> List[str]:
    """Fields generated into ``__init__`` by dataclasses or pydantic."""
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    model_fields = getattr(cls, "__pydantic_fields__", None)
    if isinstance(model_fields, dict):
        return list(model_fields)
    return []


def parameter_info(param: inspect.Parameter, promoted: Tuple[str, ...] = ()) -> Dict[str, Any]:
    has_default = param.default is not _EMPTY
    return {
        "name": param.name,
        "type": format_type(param.annotation),
        "has_default": has_default,
        "default": param.default if has_default else None,
        "is_promoted": param.name in promoted,
        "is_variadic": param.kind
        in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD),
        "kind": param.kind.name.lower(),
    }


def constructor_parameters(target: Any) -> List[Dict[str, Any]]:
    cls = class_of(target)
    if cls is None or constructor(cls) is None:
        return []
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError) as e:
        logger.debug(f"No signature for {cls!r}: {e}")
        return []
    promoted = tuple(declared_fields(cls))
    return [parameter_info(param, promoted) for param in signature.parameters.values()]


# ----------------------------------------------------------------------------
# Type strings
# ----------------------------------------------------------------------------


def _type_name(tp: Any) -> str:
    if tp is type(None) or tp is None:
        return "None"
    if tp is typing.Any:
        return "Any"
    if isinstance(tp, typing.ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        return qualified_name(tp)
    return str(tp).replace("typing.", "")


def format_type(annotation: Any) -> Optional[str]:
    """Normalise an annotation to a type string.

    ``Optional[T]`` becomes ``?T``, other unions ``A|B``; ``Any`` already
    admits ``None`` and is never prefixed. Unevaluated string annotations are
    returned as written.
    """
    if annotation is _EMPTY or annotation is inspect.Signature.empty:
        return None
    if annotation is typing.Final or annotation is typing.ClassVar:
        # bare qualifier, the type is inferred from the value
        return None
    if isinstance(annotation, str):
        return annotation.strip("'\"")
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(annotation)
        present = [arg for arg in args if arg is not type(None)]
        if len(present) == 1 and len(args) == 2:
            if present[0] is typing.Any:
                return "Any"
            return "?" + format_type(present[0])
        return "|".join(format_type(arg) for arg in args)
    if origin is typing.Annotated:
        return format_type(typing.get_args(annotation)[0])
    if origin is typing.ClassVar or origin is typing.Final:
        args = typing.get_args(annotation)
        return format_type(args[0]) if args else _type_name(origin)
    if origin is typing.Literal:
        return "Literal[" + ", ".join(repr(arg) for arg in typing.get_args(annotation)) + "]"
    if origin is not None:
        args = typing.get_args(annotation)
        name = getattr(origin, "__name__", None) or _type_name(origin)
        if not args:
            return name
        return f"{name}[" + ", ".join(format_type(arg) or "Any" for arg in args) + "]"
    return _type_name(annotation)


def return_type(func: Any) -> Optional[str]:
    try:
        return format_type(inspect.signature(func).return_annotation)
    except (TypeError, ValueError) as e:
        logger.debug(f"No signature for {func!r}: {e}")
        return None
