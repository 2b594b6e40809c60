"""Route query over a :class:`~fluent_introspect.registries.Router`."""

from __future__ import annotations

import builtins
from typing import Any, Dict, List, Optional, Sequence

from ..patterns import WILDCARD, compile_pattern
from ..registries import Route, Router, middleware_name, registry_key
from .base import BaseQuery, require_str


def route_uses_middleware(route: Route, middleware: str) -> bool:
    """Exact match, or a parametrised entry (``"throttle:60,1"`` uses ``"throttle"``)."""
    return any(m == middleware or m.startswith(middleware + ":") for m in route.middleware)


class RoutesQuery(BaseQuery):
    """Query registered routes.

    Candidates are :class:`~fluent_introspect.registries.Route` records; name
    filters apply to the route name and never match unnamed routes. Paths are
    compared with a single leading slash (``users/{id}`` is ``/users/{id}``).

    Example:
        Introspect.routes(router) \\
            .where_uses_middleware("auth") \\
            .where_path_starts_with("/admin") \\
            .get()
    """

    def __init__(self, router: Router):
        super().__init__()
        self.router = router

    def _discover(self) -> List[Route]:
        return list(self.router.routes())

    def _name_of(self, candidate: Any) -> Optional[str]:
        return getattr(candidate, "name", None)

    def where_uses_controller(self, controller: Any, method: Optional[str] = None) -> "RoutesQuery":
        """Routes dispatched to ``controller`` (and ``method``, when given)."""
        wanted = registry_key(controller)

        def check(route: Route) -> bool:
            cls, action = route.controller_action()
            if cls != wanted:
                return False
            return method is None or action == method

        label = f"{wanted}@{method}" if method else wanted
        return self.where(check, f"controller {label}")

    def where_uses_middleware(self, middleware: Any) -> "RoutesQuery":
        name = middleware_name(middleware)
        return self.where(lambda r: route_uses_middleware(r, name), f"middleware {name}")

    def where_uses_middlewares(self, middlewares: Sequence[Any], all: bool = True) -> "RoutesQuery":
        if isinstance(middlewares, str):
            middlewares = [middlewares]
        names = [middleware_name(m) for m in middlewares]
        combine = builtins.all if all else builtins.any

        return self.where(
            lambda r: combine(route_uses_middleware(r, name) for name in names),
            f"middleware {'all' if all else 'any'} of {names}",
        )

    def where_doesnt_use_middleware(self, middleware: Any) -> "RoutesQuery":
        name = middleware_name(middleware)
        return self.where_not(lambda r: route_uses_middleware(r, name), f"middleware {name}")

    def where_path_equals(self, pattern: str) -> "RoutesQuery":
        matcher = compile_pattern(pattern)
        return self.where(lambda r: matcher(r.uri), f"path ~ {pattern!r}")

    def where_path_starts_with(self, prefix: str) -> "RoutesQuery":
        """Path prefix; a prefix containing ``*`` is matched as a whole-path pattern."""
        require_str(prefix, "Path prefix")
        if WILDCARD in prefix:
            matcher = compile_pattern(prefix)
            return self.where(lambda r: matcher(r.uri), f"path ~ {prefix!r}")
        return self.where(lambda r: r.uri.startswith(prefix), f"path starts with {prefix!r}")

    def where_path_ends_with(self, suffix: str) -> "RoutesQuery":
        require_str(suffix, "Path suffix")
        return self.where(lambda r: r.uri.endswith(suffix), f"path ends with {suffix!r}")

    def where_path_contains(self, substring: str) -> "RoutesQuery":
        require_str(substring, "Path substring")
        return self.where(lambda r: substring in r.uri, f"path contains {substring!r}")

    def where_uses_method(self, method: str) -> "RoutesQuery":
        require_str(method, "HTTP method")
        wanted = method.upper()
        return self.where(lambda r: wanted in r.methods, f"method {wanted}")

    def to_list(self) -> List[Dict[str, Any]]:
        return [route.to_dict() for route in self.get()]
