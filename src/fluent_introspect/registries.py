"""In-process registries that the registry-backed queries enumerate.

An application (or a framework adapter) records its routes, event listeners,
service providers, middleware and template locations here; the query
builders only ever read them. Each builder receives its registry explicitly,
so tests and adapters can hand in any object with the same methods.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from . import templates
from .exceptions import ConfigurationError, ViewNotFoundError
from .reflection import qualified_name

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


def registry_key(target: Any) -> str:
    """Key a registry stores ``target`` under: names as given, classes by qualified name."""
    return target if isinstance(target, str) else qualified_name(target)


def middleware_name(middleware: Any) -> str:
    """Name of a middleware given as an alias, a parameterised alias or a class."""
    return registry_key(middleware)


def _as_list(items: Any) -> List[Any]:
    """A single name or class as a one-item list, any other sequence as a list."""
    if isinstance(items, (str, type)):
        return [items]
    return list(items)


# ----------------------------------------------------------------------------
# Routing
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class Route:
    """One registered route.

    Attributes:
        path: URI template as registered (``"users/{id}"``)
        methods: Upper-case HTTP methods
        controller: ``"module.Class@method"`` string, ``(Class, "method")``
            tuple, invokable class, or plain function
        name: Optional route name (``"users.show"``)
        middleware: Middleware names, possibly with parameters (``"throttle:60,1"``)
    """

    path: str
    methods: Tuple[str, ...] = ("GET",)
    controller: Any = None
    name: Optional[str] = None
    middleware: Tuple[str, ...] = ()

    def __post_init__(self):
        methods = tuple(m.upper() for m in _as_list(self.methods))
        if "GET" in methods and "HEAD" not in methods:
            methods += ("HEAD",)
        object.__setattr__(self, "methods", methods)
        object.__setattr__(
            self, "middleware", tuple(middleware_name(m) for m in _as_list(self.middleware))
        )

    @property
    def uri(self) -> str:
        """Path normalised to a single leading slash."""
        return "/" + self.path.lstrip("/")

    def controller_action(self) -> Tuple[Optional[str], Optional[str]]:
        """Controller as ``(qualified class name, method)``; either may be ``None``."""
        controller = self.controller
        if controller is None:
            return None, None
        if isinstance(controller, str):
            cls, _, method = controller.partition("@")
            return cls, method or None
        if isinstance(controller, (tuple, list)) and controller:
            method = controller[1] if len(controller) > 1 else None
            return registry_key(controller[0]), method
        if isinstance(controller, type):
            return qualified_name(controller), "__call__"
        return qualified_name(controller), None

    def to_dict(self) -> Dict[str, Any]:
        cls, method = self.controller_action()
        return {
            "name": self.name,
            "path": self.uri,
            "methods": list(self.methods),
            "controller": cls,
            "action": method,
            "middleware": list(self.middleware),
        }


class Router:
    """Ordered route table."""

    def __init__(self, routes: Optional[Sequence[Route]] = None):
        self._routes: List[Route] = list(routes or [])

    def add(self, route: Route) -> Route:
        self._routes.append(route)
        return route

    def add_route(
        self,
        methods: Union[str, Sequence[str]],
        path: str,
        controller: Any = None,
        name: Optional[str] = None,
        middleware: Union[str, Sequence[Any]] = (),
    ) -> Route:
        methods = _as_list(methods)
        unknown = [m for m in methods if m.upper() not in HTTP_METHODS]
        if unknown:
            raise ConfigurationError(
                "Unknown HTTP method",
                context={"methods": unknown, "path": path},
                suggestions=[f"Use one of: {', '.join(HTTP_METHODS)}"],
            )
        return self.add(Route(path, tuple(methods), controller, name, tuple(_as_list(middleware))))

    def get(self, path: str, controller: Any = None, **kwargs: Any) -> Route:
        return self.add_route("GET", path, controller, **kwargs)

    def post(self, path: str, controller: Any = None, **kwargs: Any) -> Route:
        return self.add_route("POST", path, controller, **kwargs)

    def put(self, path: str, controller: Any = None, **kwargs: Any) -> Route:
        return self.add_route("PUT", path, controller, **kwargs)

    def delete(self, path: str, controller: Any = None, **kwargs: Any) -> Route:
        return self.add_route("DELETE", path, controller, **kwargs)

    def routes(self) -> List[Route]:
        return list(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes())

    def __len__(self) -> int:
        return len(self._routes)


# ----------------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------------


def listener_name(listener: Any) -> str:
    """Readable name for a listener.

    Strings stay as they are, ``(target, "method")`` pairs use the target,
    classes and functions use their qualified name, other callables their
    class. Lambdas come out as ``"<lambda>"`` qualified names.
    """
    if isinstance(listener, str):
        return listener
    if isinstance(listener, (tuple, list)) and listener:
        return listener_name(listener[0])
    if isinstance(listener, type):
        return qualified_name(listener)
    if hasattr(listener, "__qualname__") and hasattr(listener, "__module__"):
        return qualified_name(listener)
    return qualified_name(type(listener))


class EventDispatcher:
    """Event name to listener list mapping, in registration order."""

    def __init__(self):
        self._listeners: Dict[str, List[Any]] = {}

    def listen(self, events: Union[str, type, Sequence[Union[str, type]]], listener: Any = None):
        """Register ``listener`` for one or several events.

        Events may be given as names or event classes. Registering an event
        with no listener records it with an empty list.
        """
        for event in _as_list(events):
            name = registry_key(event)
            listeners = self._listeners.setdefault(name, [])
            if listener is not None:
                listeners.append(listener)

    def forget(self, event: Union[str, type]) -> None:
        name = registry_key(event)
        self._listeners.pop(name, None)

    def raw_listeners(self) -> Dict[str, List[Any]]:
        return {event: list(listeners) for event, listeners in self._listeners.items()}

    def get_listeners(self, event: Union[str, type]) -> List[Any]:
        name = registry_key(event)
        return list(self._listeners.get(name, []))

    def has_listeners(self, event: Union[str, type]) -> bool:
        return bool(self.get_listeners(event))


# ----------------------------------------------------------------------------
# Service container
# ----------------------------------------------------------------------------


class Container:
    """Loaded service providers and the deferred services they provide."""

    def __init__(self):
        self._providers: Dict[str, Any] = {}
        self._deferred: Dict[str, str] = {}

    def register(self, provider: Any, provides: Sequence[Any] = ()) -> None:
        """Load a provider; any ``provides`` services mark it as deferred."""
        name = registry_key(provider)
        self._providers[name] = provider
        for service in _as_list(provides):
            self._deferred[registry_key(service)] = name

    def loaded_providers(self) -> List[str]:
        return list(self._providers)

    def deferred_services(self) -> Dict[str, str]:
        """Service name mapped to the provider that will register it."""
        return dict(self._deferred)


# ----------------------------------------------------------------------------
# Middleware
# ----------------------------------------------------------------------------


@dataclass
class MiddlewareRegistry:
    """Middleware aliases, named groups, priority order and global stack."""

    aliases: Dict[str, str] = field(default_factory=dict)
    groups: Dict[str, List[str]] = field(default_factory=dict)
    priority: List[str] = field(default_factory=list)
    global_middleware: List[str] = field(default_factory=list)

    def alias(self, name: str, middleware: Any) -> None:
        self.aliases[name] = middleware_name(middleware)

    def group(self, name: str, middleware: Sequence[Any]) -> None:
        self.groups[name] = [middleware_name(m) for m in _as_list(middleware)]

    def push_global(self, middleware: Any) -> None:
        self.global_middleware.append(middleware_name(middleware))

    def set_priority(self, middleware: Sequence[Any]) -> None:
        self.priority = [middleware_name(m) for m in _as_list(middleware)]


# ----------------------------------------------------------------------------
# Views
# ----------------------------------------------------------------------------


class FileViewFinder:
    """Locates templates under search roots and namespace hints.

    View names are dotted paths relative to a root without the extension
    (``emails/welcome.html`` -> ``emails.welcome``); views under a namespace
    hint are prefixed with ``namespace::``.
    """

    def __init__(
        self,
        paths: Sequence[Union[str, Path]] = (),
        hints: Optional[Dict[str, Sequence[Union[str, Path]]]] = None,
        extensions: Optional[Sequence[str]] = None,
        syntax: str = templates.JINJA,
    ):
        if syntax not in templates.SYNTAXES:
            raise ConfigurationError(
                f"Unknown template syntax: {syntax}",
                suggestions=[f"Use one of: {', '.join(templates.SYNTAXES)}"],
            )
        self.syntax = syntax
        self.paths: List[Path] = [Path(p) for p in paths]
        self.hints: Dict[str, List[Path]] = {
            ns: [Path(p) for p in locations] for ns, locations in (hints or {}).items()
        }
        self.extensions: Tuple[str, ...] = tuple(
            extensions or templates.DEFAULT_EXTENSIONS[syntax]
        )

    def add_location(self, path: Union[str, Path]) -> None:
        self.paths.append(Path(path))

    def add_namespace(self, namespace: str, paths: Union[str, Path, Sequence]) -> None:
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self.hints.setdefault(namespace, []).extend(Path(p) for p in paths)

    def _strip_extension(self, filename: str) -> Optional[str]:
        # longest first so ".blade.php" wins over ".php"
        for ext in sorted(self.extensions, key=len, reverse=True):
            if filename.endswith(ext) and len(filename) > len(ext):
                return filename[: -len(ext)]
        return None

    def views_in(self, root: Path, namespace: Optional[str] = None) -> List[str]:
        """View names under one root, in directory-walk order."""
        if not root.is_dir():
            return []
        views: List[str] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            rel = Path(dirpath).relative_to(root)
            prefix = ".".join(rel.parts)
            for filename in sorted(filenames):
                stem = self._strip_extension(filename)
                if stem is None:
                    continue
                name = f"{prefix}.{stem}" if prefix else stem
                views.append(f"{namespace}::{name}" if namespace else name)
        return views

    def views(self) -> List[str]:
        """Every view under the search roots, then under each namespace."""
        found: Dict[str, None] = {}
        for root in self.paths:
            for view in self.views_in(root):
                found.setdefault(view, None)
        for namespace, roots in self.hints.items():
            for root in roots:
                for view in self.views_in(root, namespace):
                    found.setdefault(view, None)
        return list(found)

    def find(self, name: str) -> Path:
        """Resolve a view name to its file.

        Raises:
            ViewNotFoundError: If no root contains the view
        """
        namespace, sep, view = name.partition("::")
        if sep:
            roots = self.hints.get(namespace, [])
        else:
            view, roots = name, self.paths
        relative = Path(*view.split("."))
        for root in roots:
            for ext in self.extensions:
                candidate = root / relative.parent / (relative.name + ext)
                if candidate.is_file():
                    return candidate
        raise ViewNotFoundError(
            "View not found",
            view=name,
            searched=roots,
            suggestions=["Check the view name and the configured view paths"],
        )

    def content(self, name: str) -> Optional[str]:
        """Raw template source, or ``None`` when the view cannot be read."""
        try:
            return self.find(name).read_text(encoding="utf-8")
        except (ViewNotFoundError, OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read view {name}: {e}")
            return None


__all__ = [
    "Route",
    "Router",
    "EventDispatcher",
    "Container",
    "MiddlewareRegistry",
    "FileViewFinder",
    "listener_name",
    "middleware_name",
    "registry_key",
]
