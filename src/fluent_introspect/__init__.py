"""
fluent-introspect: Fluent, chainable introspection for Python code.

Query classes, traits (mixins), interfaces (ABCs and protocols), pydantic
models and queued jobs, plus application registries (routes, middleware,
events, service providers and template views), with the same
``where_*``/``or_``/``in_`` filter vocabulary.

Modules:
    patterns: Wildcard pattern matching used by every name filter
    query: Fluent query builders over discovered classes and registries
    inspectors: Single-target introspectors (class, method, model, job...)
    reflection: Best-effort reflection helpers the builders are made of
    registries: Router, event dispatcher, container, middleware and views
    config: TOML configuration for the command line tool

Quick Start::

    from fluent_introspect import Introspect

    # Concrete repositories in the app package
    repos = Introspect.classes(modules=["app"]) \\
        .where_implements("app.contracts.Repository") \\
        .where_concrete() \\
        .get()

    # Everything about one class
    Introspect.class_("app.models.User").to_dict()
"""

__version__ = "0.1.0"

from fluent_introspect.attributes import attribute
from fluent_introspect.contracts import ShouldBeEncrypted, ShouldBeUnique, ShouldQueue
from fluent_introspect.exceptions import (
    ConfigurationError,
    IntrospectError,
    InvalidTargetError,
    PatternError,
    ViewNotFoundError,
)
from fluent_introspect.facade import Introspect
from fluent_introspect.logging import disable_verbose, enable_verbose, is_verbose, verbose
from fluent_introspect.patterns import compile_pattern, matches_pattern
from fluent_introspect.query import BaseQuery, FilterChain, JobHeuristic
from fluent_introspect.registries import (
    Container,
    EventDispatcher,
    FileViewFinder,
    MiddlewareRegistry,
    Route,
    Router,
)

__all__ = [
    # Version
    "__version__",
    # Facade
    "Introspect",
    # Query API
    "BaseQuery",
    "FilterChain",
    "JobHeuristic",
    "compile_pattern",
    "matches_pattern",
    # Registries
    "Container",
    "EventDispatcher",
    "FileViewFinder",
    "MiddlewareRegistry",
    "Route",
    "Router",
    # Declarations
    "attribute",
    "ShouldQueue",
    "ShouldBeUnique",
    "ShouldBeEncrypted",
    # Errors
    "IntrospectError",
    "ConfigurationError",
    "PatternError",
    "InvalidTargetError",
    "ViewNotFoundError",
    # Logging
    "enable_verbose",
    "disable_verbose",
    "is_verbose",
    "verbose",
]
