"""Repositories: an abstract base and two concrete implementations."""

from typing import Optional, final

from fluent_introspect import attribute

from .contracts import Cacheable, Repository
from .markers import Deprecated, Table
from .mixins import AuditMixin, SoftDeletesMixin


class BaseRepository(Repository):
    connection: str

    def __init__(self, connection: str = "default"):
        self.connection = connection

    def describe(self) -> str:
        return f"{type(self).__name__} on {self.connection}"


@attribute(Table("users"))
class UserRepository(AuditMixin, BaseRepository):
    TABLE = "users"

    def find(self, key: int, *, with_trashed: bool = False) -> Optional[dict]:
        """Find a record by key.

        Args:
            key: Primary key to look up
            with_trashed: Include soft-deleted rows

        Returns:
            The record, or None

        Raises:
            KeyError: If the store is unavailable
        """
        return None

    def save(self, item: dict) -> None:
        pass

    def cache_key(self) -> str:
        return "users"

    @attribute(Deprecated("use find"))
    def legacy_find(self, key):
        """Old lookup.

        :param key: the key
        :returns: the record
        :raises LookupError: when missing
        """
        return self.find(key)

    @staticmethod
    def make(connection: str = "default") -> "UserRepository":
        return UserRepository(connection)

    @classmethod
    def for_connection(cls, connection: str) -> "UserRepository":
        return cls(connection)

    @final
    def flush(self) -> int:
        return 0

    def _hydrate(self, row: dict) -> dict:
        return row


class PostRepository(SoftDeletesMixin, BaseRepository, Cacheable):
    def find(self, key: int) -> Optional[dict]:
        return None

    def save(self, item: dict) -> None:
        pass

    def cache_key(self) -> str:
        return "posts"
