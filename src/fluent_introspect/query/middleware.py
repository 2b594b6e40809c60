"""Middleware query over a :class:`~fluent_introspect.registries.MiddlewareRegistry`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from ..exceptions import ConfigurationError
from ..patterns import compile_pattern
from ..registries import MiddlewareRegistry, Router
from .base import BaseQuery, require_str


@dataclass(frozen=True)
class MiddlewareEntry:
    """One known middleware: its alias (or its own name) and its target."""

    key: str
    target: str

    def refers_to(self, names: Any) -> bool:
        return self.key in names or self.target in names


class MiddlewareQuery(BaseQuery):
    """Query middleware from aliases, groups and the global stack.

    Each middleware appears once: aliases first, then group members and
    global middleware not already known under an alias. Results are the
    middleware targets (class names); ``all()`` keeps the alias keys.

    Example:
        Introspect.middleware(registry).where_in_group("web").get()
    """

    def __init__(self, registry: MiddlewareRegistry, router: Optional[Router] = None):
        super().__init__()
        self.registry = registry
        self.router = router

    def _discover(self) -> List[MiddlewareEntry]:
        entries: Dict[str, MiddlewareEntry] = {}
        for alias, target in self.registry.aliases.items():
            entries[alias] = MiddlewareEntry(alias, target)
        known_targets = {entry.target for entry in entries.values()}
        extra = [m for members in self.registry.groups.values() for m in members]
        extra += list(self.registry.global_middleware)
        for name in extra:
            if name in entries or name in known_targets:
                continue
            entries[name] = MiddlewareEntry(name, name)
            known_targets.add(name)
        return list(entries.values())

    def _from_explicit(self, candidates: List[Any]) -> List[MiddlewareEntry]:
        return [
            c if isinstance(c, MiddlewareEntry) else MiddlewareEntry(str(c), str(c))
            for c in candidates
        ]

    def _name_of(self, candidate: Any) -> Optional[str]:
        return candidate.key

    def _present(self, candidate: MiddlewareEntry) -> str:
        return candidate.target

    def where_name_equals(self, pattern: str) -> "MiddlewareQuery":
        """Alias or target matches the pattern."""
        matcher = compile_pattern(pattern)
        return self.where(
            lambda e: matcher(e.key) or matcher(e.target), f"name ~ {pattern!r}"
        )

    def where_global(self) -> "MiddlewareQuery":
        return self.where(lambda e: e.refers_to(self.registry.global_middleware), "global")

    def where_in_group(self, group: str) -> "MiddlewareQuery":
        """Members of ``group``; an unknown group matches nothing."""
        require_str(group, "Group")
        return self.where(
            lambda e: group in self.registry.groups and e.refers_to(self.registry.groups[group]),
            f"in group {group!r}",
        )

    def where_namespace(self, namespace: str) -> "MiddlewareQuery":
        """Targets defined under a module prefix."""
        require_str(namespace, "Namespace")
        return self.where(lambda e: e.target.startswith(namespace), f"namespace {namespace!r}")

    def where_used_by_routes(self) -> "MiddlewareQuery":
        """Middleware referenced by at least one route, parameters ignored.

        Raises:
            ConfigurationError: If the query was built without a router
        """
        if self.router is None:
            raise ConfigurationError(
                "where_used_by_routes() needs a router",
                suggestions=["Pass one: Introspect.middleware(registry, router=router)"],
            )
        return self.where(lambda e: e.refers_to(self._route_middleware()), "used by routes")

    def _route_middleware(self) -> Set[str]:
        return {
            m.split(":", 1)[0] for route in self.router.routes() for m in route.middleware
        }

    def all(self) -> Dict[str, str]:
        """Matching middleware keyed by alias (or by their own name)."""
        return {entry.key: entry.target for entry in self._iter_matches()}

    def aliases(self) -> Dict[str, str]:
        return dict(self.registry.aliases)

    def groups(self) -> Dict[str, List[str]]:
        return {name: list(members) for name, members in self.registry.groups.items()}

    def priority(self) -> List[str]:
        return list(self.registry.priority)

    def global_(self) -> List[str]:
        return list(self.registry.global_middleware)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aliases": self.aliases(),
            "groups": self.groups(),
            "priority": self.priority(),
            "global": self.global_(),
        }
