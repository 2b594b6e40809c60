"""Queued job query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .. import discovery, reflection
from ..contracts import ShouldQueue
from ..inspectors import job as job_meta
from .base import BaseQuery, require_str


@dataclass(frozen=True)
class JobHeuristic:
    """Decides whether a discovered class is a queued job.

    A class counts as a job when it implements the marker interface, when its
    name ends with one of ``suffixes``, or when its module path contains one
    of ``module_segments``. This is a heuristic: an unrelated class called
    ``BackgroundJob`` is a false positive, and a job named otherwise and
    living elsewhere is missed unless it implements the marker. Pass an empty
    ``suffixes``/``module_segments`` to rely on the marker alone, or use
    ``in_()`` to bypass discovery entirely.
    """

    marker: Optional[type] = ShouldQueue
    suffixes: Tuple[str, ...] = ("Job",)
    module_segments: Tuple[str, ...] = ("jobs",)

    def __call__(self, cls: type) -> bool:
        if reflection.is_interface(cls):
            return False
        if self.marker is not None and reflection.implements_interface(cls, self.marker):
            return True
        if any(cls.__name__.endswith(suffix) for suffix in self.suffixes):
            return True
        segments = (cls.__module__ or "").split(".")
        return any(segment in segments for segment in self.module_segments)

    @classmethod
    def from_config(cls, discovery_config: Any) -> "JobHeuristic":
        """Heuristic using the ``[discovery]`` job suffixes and module segments."""
        return cls(
            suffixes=tuple(discovery_config.job_suffixes),
            module_segments=tuple(discovery_config.job_module_segments),
        )


MARKER_ONLY = JobHeuristic(suffixes=(), module_segments=())


class JobsQuery(BaseQuery):
    """Query queued job classes.

    Example:
        Introspect.jobs(modules=["app"]) \\
            .where_queue("emails") \\
            .or_(lambda q: q.where_queue("notifications")) \\
            .get()
    """

    def __init__(
        self,
        modules: Optional[Sequence[str]] = None,
        heuristic: Optional[JobHeuristic] = None,
        include_stdlib: bool = False,
    ):
        super().__init__()
        self.modules = list(modules) if modules else None
        self.heuristic = heuristic or JobHeuristic()
        self.include_stdlib = include_stdlib

    def _discover(self) -> List[type]:
        return [
            cls
            for cls in discovery.declared_classes(self.modules, self.include_stdlib)
            if self.heuristic(cls)
        ]

    def _job(self, candidate: Any) -> Optional[type]:
        return reflection.class_of(candidate)

    def where_queue(self, queue: str) -> "JobsQuery":
        require_str(queue, "Queue")
        return self.where(lambda c: job_meta.queue(self._job(c)) == queue, f"queue == {queue!r}")

    def where_connection(self, connection: str) -> "JobsQuery":
        require_str(connection, "Connection")
        return self.where(
            lambda c: job_meta.connection(self._job(c)) == connection,
            f"connection == {connection!r}",
        )

    def where_tries(self, tries: int) -> "JobsQuery":
        return self.where(lambda c: job_meta.tries(self._job(c)) == tries, f"tries == {tries}")

    def where_has_trait(self, trait: Any) -> "JobsQuery":
        return self.where(
            lambda c: reflection.uses_trait(c, trait), f"uses {reflection.qualified_name(trait)}"
        )

    def where_unique(self) -> "JobsQuery":
        return self.where(job_meta.is_unique, "unique")

    def where_encrypted(self) -> "JobsQuery":
        return self.where(job_meta.is_encrypted, "encrypted")

    def where_has_middleware(self) -> "JobsQuery":
        """Jobs whose ``middleware()`` returns something when called statically."""
        return self.where(lambda c: bool(job_meta.middleware(self._job(c))), "has middleware")

    def to_list(self) -> List[Dict[str, Any]]:
        """Settings of every matching job."""
        return [job_meta.summary(self._job(c)) for c in self.get() if self._job(c) is not None]
