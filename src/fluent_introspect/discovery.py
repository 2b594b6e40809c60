"""Live enumeration of the classes currently loaded in the interpreter.

Python keeps no flat table of declared classes, so discovery walks the
subclass graph from ``object`` breadth-first. Only classes whose defining
module has been imported are visible; :func:`import_modules` loads a package
tree first when a caller wants everything under it considered.

Standard-library classes are skipped unless ``include_stdlib`` is set, which
keeps discovery focused on application code.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
import sys
from collections import deque
from typing import Iterable, List, Optional, Sequence

from . import reflection

logger = logging.getLogger(__name__)

_STDLIB = frozenset(sys.stdlib_module_names) | {"builtins", "__main__"}


def is_stdlib_module(module: Optional[str]) -> bool:
    if not module:
        return True
    top = module.split(".", 1)[0]
    return top in _STDLIB or top.lstrip("_") in _STDLIB


def in_modules(module: Optional[str], prefixes: Optional[Sequence[str]]) -> bool:
    """True when ``module`` is one of ``prefixes`` or nested below one."""
    if not prefixes:
        return True
    if not module:
        return False
    return any(module == prefix or module.startswith(prefix + ".") for prefix in prefixes)


def _subclasses(cls: type) -> List[type]:
    try:
        return type.__subclasses__(cls)
    except TypeError as e:
        logger.debug(f"Cannot list subclasses of {cls!r}: {e}")
        return []


def declared_classes(
    modules: Optional[Sequence[str]] = None, include_stdlib: bool = False
) -> List[type]:
    """Snapshot of every loaded class, in discovery order.

    Args:
        modules: Optional module prefixes to restrict the result to
        include_stdlib: Keep classes defined by standard-library modules

    Returns:
        Classes reachable from ``object``, in breadth-first order
    """
    seen = {object}
    found: List[type] = []
    queue = deque([object])
    while queue:
        for sub in _subclasses(queue.popleft()):
            if sub in seen:
                continue
            seen.add(sub)
            queue.append(sub)
            module = getattr(sub, "__module__", None)
            if not isinstance(module, str):
                module = None
            if not include_stdlib and is_stdlib_module(module):
                continue
            if in_modules(module, modules):
                found.append(sub)
    return found


def declared_interfaces(
    modules: Optional[Sequence[str]] = None, include_stdlib: bool = False
) -> List[type]:
    return [
        cls for cls in declared_classes(modules, include_stdlib) if reflection.is_interface(cls)
    ]


def declared_traits(
    modules: Optional[Sequence[str]] = None, include_stdlib: bool = False
) -> List[type]:
    """Every mixin used by at least one declared class, first use first."""
    found = {}
    for cls in declared_classes(modules, include_stdlib):
        for trait in reflection.all_traits(cls):
            if not include_stdlib and is_stdlib_module(trait.__module__):
                continue
            if in_modules(trait.__module__, modules):
                found.setdefault(trait, None)
    return list(found)


def import_modules(names: Iterable[str], recursive: bool = True) -> List[str]:
    """Import modules (and, for packages, their submodules) by name.

    Modules that fail to import are logged and skipped.

    Returns:
        Names of the modules that were imported
    """
    imported: List[str] = []
    for name in names:
        try:
            module = importlib.import_module(name)
        except Exception as e:
            logger.warning(f"Could not import {name}: {e}")
            continue
        imported.append(name)
        if not recursive or not hasattr(module, "__path__"):
            continue

        def on_error(failed: str) -> None:
            logger.warning(f"Could not import {failed} while walking {name}")

        for _, sub_name, _ in pkgutil.walk_packages(
            module.__path__, prefix=module.__name__ + ".", onerror=on_error
        ):
            try:
                importlib.import_module(sub_name)
            except Exception as e:
                logger.warning(f"Could not import {sub_name}: {e}")
                continue
            imported.append(sub_name)
    return imported
