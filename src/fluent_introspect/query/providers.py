"""Service provider query over a :class:`~fluent_introspect.registries.Container`."""

from __future__ import annotations

from typing import Any, Dict, List

from ..registries import Container, registry_key
from .base import BaseQuery


class ProvidersQuery(BaseQuery):
    """Query loaded service providers.

    A provider is *deferred* when at least one service is bound to it in the
    container's deferred-service map, and *eager* otherwise.

    Example:
        Introspect.providers(container).where_deferred().get()
    """

    def __init__(self, container: Container):
        super().__init__()
        self.container = container

    def _discover(self) -> List[str]:
        return self.container.loaded_providers()

    def _from_explicit(self, candidates: List[Any]) -> List[str]:
        return [registry_key(c) for c in candidates]

    def _is_deferred(self, provider: str) -> bool:
        return provider in self.container.deferred_services().values()

    def where_deferred(self) -> "ProvidersQuery":
        return self.where(self._is_deferred, "deferred")

    def where_eager(self) -> "ProvidersQuery":
        return self.where_not(self._is_deferred, "deferred")

    def where_provides(self, service: Any) -> "ProvidersQuery":
        """Providers bound to ``service`` (a name or class) as deferred."""
        name = registry_key(service)
        return self.where(
            lambda p: self.container.deferred_services().get(name) == p, f"provides {name}"
        )

    def all(self) -> List[str]:
        """Every loaded provider, ignoring filters."""
        return self._discover()

    def is_registered(self, provider: Any) -> bool:
        return registry_key(provider) in self._discover()

    def deferred_services(self) -> Dict[str, str]:
        return self.container.deferred_services()

    def provided_services(self, provider: Any) -> List[str]:
        name = registry_key(provider)
        return [s for s, p in self.container.deferred_services().items() if p == name]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Every matching provider with its deferred flag and services."""
        result = {}
        for provider in self.get():
            deferred = self._is_deferred(provider)
            result[provider] = {
                "class": provider,
                "deferred": deferred,
                "provides": self.provided_services(provider) if deferred else [],
            }
        return result
