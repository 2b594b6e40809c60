"""Event query over an :class:`~fluent_introspect.registries.EventDispatcher`."""

from __future__ import annotations

from typing import Any, Dict, List

from ..registries import EventDispatcher, listener_name
from .base import BaseQuery


class EventsQuery(BaseQuery):
    """Query registered events and their listeners.

    Candidates are event names in registration order.

    Example:
        Introspect.events(dispatcher) \\
            .where_name_starts_with("app.events.") \\
            .where_has_listener("app.listeners.SendWelcomeEmail") \\
            .get()
    """

    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

    def _discover(self) -> List[str]:
        return [event for event, listeners in self._raw().items() if isinstance(event, str)]

    def _raw(self) -> Dict[str, List[Any]]:
        return {
            event: list(listeners)
            for event, listeners in self.dispatcher.raw_listeners().items()
            if isinstance(listeners, (list, tuple))
        }

    def _listeners_of(self, event: str) -> List[str]:
        return [listener_name(listener) for listener in self._raw().get(event, [])]

    def where_has_listener(self, listener: Any) -> "EventsQuery":
        """Events with ``listener`` (a name, class or callable) among their listeners."""
        wanted = listener_name(listener)
        return self.where(
            lambda event: wanted in self._listeners_of(event), f"has listener {wanted}"
        )

    def where_has_listeners(self) -> "EventsQuery":
        return self.where(lambda event: bool(self._listeners_of(event)), "has listeners")

    def where_has_no_listeners(self) -> "EventsQuery":
        return self.where(lambda event: not self._listeners_of(event), "has no listeners")

    def all(self) -> List[str]:
        """Every registered event name, ignoring filters."""
        return self._discover()

    def listeners_for(self, event: Any) -> List[str]:
        """Normalised listener names for one event."""
        return [listener_name(listener) for listener in self.dispatcher.get_listeners(event)]

    def has_listeners(self, event: Any) -> bool:
        return bool(self.listeners_for(event))

    def to_dict(self) -> Dict[str, List[str]]:
        """Matching events mapped to their listener names."""
        return {event: self._listeners_of(event) for event in self.get()}
