"""Fluent query builders for classes and framework registries.

Every builder enumerates a candidate universe (live discovery, or an explicit
list given to ``in_()``) and keeps the candidates that pass its filter chain.

Example:
    from fluent_introspect import Introspect

    # Concrete controllers outside the admin area
    controllers = Introspect.classes(modules=["app"]) \\
        .where_name_ends_with("Controller") \\
        .where_concrete() \\
        .where_name_doesnt_equal("app.admin.*") \\
        .get()

    # Routes guarded by either auth flavour
    guarded = Introspect.routes(router) \\
        .where_uses_middleware("auth") \\
        .or_(lambda q: q.where_uses_middleware("auth.basic")) \\
        .get()

    # Filters:
    # - names: where_name_equals/doesnt_equal (``*`` wildcards),
    #   where_name_starts_with/ends_with/contains
    # - negation: where_not(predicate) and the where_doesnt_* forms
    # - alternatives: or_(callback), one level of independent branches
"""

from .base import BaseQuery, DiscoveredSource, ExplicitSource, Filter, FilterChain
from .classes import ClassesQuery, InterfacesQuery, TraitsQuery
from .events import EventsQuery
from .jobs import MARKER_ONLY, JobHeuristic, JobsQuery
from .middleware import MiddlewareEntry, MiddlewareQuery
from .models import ModelsQuery
from .providers import ProvidersQuery
from .routes import RoutesQuery
from .views import ViewsQuery

__all__ = [
    "BaseQuery",
    "Filter",
    "FilterChain",
    "ExplicitSource",
    "DiscoveredSource",
    "ClassesQuery",
    "TraitsQuery",
    "InterfacesQuery",
    "EventsQuery",
    "JobHeuristic",
    "JobsQuery",
    "MARKER_ONLY",
    "MiddlewareEntry",
    "MiddlewareQuery",
    "ModelsQuery",
    "ProvidersQuery",
    "RoutesQuery",
    "ViewsQuery",
]
