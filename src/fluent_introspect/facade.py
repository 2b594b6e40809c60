"""Entry point for every builder and introspector.

``Introspect`` holds no state: each method returns a fresh builder or
introspector. Registry-backed builders take the registry they read.

Example:
    from fluent_introspect import Introspect

    Introspect.classes(modules=["app"]).where_implements(Repository).get()
    Introspect.routes(router).where_path_starts_with("/api").count()
    Introspect.class_(User).to_dict()
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .inspectors import (
    CallableIntrospector,
    ClassIntrospector,
    ConstantIntrospector,
    EnumIntrospector,
    InstanceIntrospector,
    JobIntrospector,
    MethodIntrospector,
    ModelIntrospector,
)
from .query import (
    ClassesQuery,
    EventsQuery,
    InterfacesQuery,
    JobHeuristic,
    JobsQuery,
    MiddlewareQuery,
    ModelsQuery,
    ProvidersQuery,
    RoutesQuery,
    TraitsQuery,
    ViewsQuery,
)
from .registries import Container, EventDispatcher, FileViewFinder, MiddlewareRegistry, Router


class Introspect:
    """Static constructors for queries and introspectors."""

    # ------------------------------------------------------------------
    # Single targets
    # ------------------------------------------------------------------

    @staticmethod
    def class_(target: Any) -> ClassIntrospector:
        return ClassIntrospector(target)

    @staticmethod
    def instance(obj: Any) -> InstanceIntrospector:
        return InstanceIntrospector(obj)

    @staticmethod
    def enum(target: Any) -> EnumIntrospector:
        return EnumIntrospector(target)

    @staticmethod
    def constants(target: Any) -> ConstantIntrospector:
        return ConstantIntrospector(target)

    @staticmethod
    def method(target: Any, name: str) -> MethodIntrospector:
        return MethodIntrospector(target, name)

    @staticmethod
    def callable_(target: Any) -> CallableIntrospector:
        return CallableIntrospector(target)

    @staticmethod
    def model(target: Any) -> ModelIntrospector:
        return ModelIntrospector(target)

    @staticmethod
    def job(target: Any) -> JobIntrospector:
        return JobIntrospector(target)

    # ------------------------------------------------------------------
    # Discovery-backed queries
    # ------------------------------------------------------------------

    @staticmethod
    def classes(modules: Optional[Sequence[str]] = None, include_stdlib: bool = False) -> ClassesQuery:
        return ClassesQuery(modules, include_stdlib)

    @staticmethod
    def traits(modules: Optional[Sequence[str]] = None, include_stdlib: bool = False) -> TraitsQuery:
        return TraitsQuery(modules, include_stdlib)

    @staticmethod
    def interfaces(
        modules: Optional[Sequence[str]] = None, include_stdlib: bool = False
    ) -> InterfacesQuery:
        return InterfacesQuery(modules, include_stdlib)

    @staticmethod
    def models(modules: Optional[Sequence[str]] = None, include_stdlib: bool = False) -> ModelsQuery:
        return ModelsQuery(modules, include_stdlib)

    @staticmethod
    def jobs(
        modules: Optional[Sequence[str]] = None,
        heuristic: Optional[JobHeuristic] = None,
        include_stdlib: bool = False,
    ) -> JobsQuery:
        return JobsQuery(modules, heuristic, include_stdlib)

    # ------------------------------------------------------------------
    # Registry-backed queries
    # ------------------------------------------------------------------

    @staticmethod
    def routes(router: Router) -> RoutesQuery:
        return RoutesQuery(router)

    @staticmethod
    def middleware(registry: MiddlewareRegistry, router: Optional[Router] = None) -> MiddlewareQuery:
        return MiddlewareQuery(registry, router)

    @staticmethod
    def events(dispatcher: EventDispatcher) -> EventsQuery:
        return EventsQuery(dispatcher)

    @staticmethod
    def providers(container: Container) -> ProvidersQuery:
        return ProvidersQuery(container)

    @staticmethod
    def views(finder: FileViewFinder) -> ViewsQuery:
        return ViewsQuery(finder)
