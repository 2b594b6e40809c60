"""Marker interfaces for queued jobs.

Implementing one of these signals a role rather than contributing behaviour.
They are protocols so that inheriting one is a declaration without any
members to implement; a structurally similar class that does not inherit the
marker is not considered to implement it.
"""

from typing import Any, Protocol


class ShouldQueue(Protocol):
    """The job is pushed onto a queue instead of running inline."""

    def handle(self) -> Any: ...


class ShouldBeUnique(Protocol):
    """Only one instance of the job may be on the queue at a time.

    Define ``unique_id()`` to narrow uniqueness to a key.
    """


class ShouldBeEncrypted(Protocol):
    """The job payload is encrypted before it is queued."""


__all__ = ["ShouldQueue", "ShouldBeUnique", "ShouldBeEncrypted"]
