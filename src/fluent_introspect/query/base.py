"""Base query classes for fluent filtering.

Every query builder is an accumulate-then-evaluate structure:

- ``where_*`` calls register predicates in a :class:`FilterChain`;
- ``or_()`` adds an alternative chain built by a callback;
- ``in_()`` replaces live discovery with an explicit candidate list;
- ``get()``/``first()``/``exists()``/``count()`` enumerate the candidates
  and evaluate the chain.

Builders are copy-on-write: each call returns a new builder and leaves the
receiver untouched, so a partially built query can be shared and extended in
several directions.

Example:
    controllers = Introspect.classes().where_name_ends_with("Controller")
    admin = controllers.where_name_starts_with("app.admin.")
    public = controllers.where_name_starts_with("app.public.")
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ..exceptions import ConfigurationError, PatternError
from ..patterns import compile_pattern
from ..reflection import qualified_name

logger = logging.getLogger(__name__)

T = TypeVar("T")
Q = TypeVar("Q", bound="BaseQuery")

Predicate = Callable[[Any], bool]

_MISSING = object()


@dataclass(frozen=True)
class Filter:
    """A named, side-effect-free predicate over one candidate.

    A predicate that raises counts as a non-match: introspection is best
    effort and a missing method or unreadable attribute must not abort the
    whole query.
    """

    description: str
    predicate: Predicate = field(repr=False, compare=False)

    def __call__(self, candidate: Any) -> bool:
        try:
            return bool(self.predicate(candidate))
        except Exception as e:
            logger.debug(f"Filter {self.description} failed on {candidate!r}: {e}")
            return False


@dataclass(frozen=True)
class FilterChain:
    """Primary AND-chain plus independent OR-branches.

    A candidate matches when it passes every primary filter, or when it
    passes the primary filters of any one branch. Branches of a branch are
    not consulted. An empty chain matches everything.
    """

    filters: Tuple[Filter, ...] = ()
    branches: Tuple["FilterChain", ...] = ()

    def add_filter(self, predicate: Filter) -> "FilterChain":
        return replace(self, filters=self.filters + (predicate,))

    def add_branch(self, branch: "FilterChain") -> "FilterChain":
        return replace(self, branches=self.branches + (branch,))

    @property
    def is_empty(self) -> bool:
        return not self.filters and not self.branches

    def primary_matches(self, candidate: Any) -> bool:
        return all(f(candidate) for f in self.filters)

    def evaluate(self, candidate: Any) -> bool:
        if self.primary_matches(candidate):
            return True
        return any(branch.primary_matches(candidate) for branch in self.branches)

    def describe_primary(self) -> str:
        return " AND ".join(f.description for f in self.filters) or "*"

    def describe(self) -> str:
        if not self.branches:
            return self.describe_primary()
        alternatives = " OR ".join(f"({branch.describe_primary()})" for branch in self.branches)
        return f"({self.describe_primary()}) OR {alternatives}"


@dataclass(frozen=True)
class ExplicitSource:
    """A caller-supplied candidate list; empty means no candidates."""

    items: Tuple[Any, ...]

    def resolve(self) -> List[Any]:
        return list(self.items)


@dataclass(frozen=True)
class DiscoveredSource:
    """A live enumeration, re-run on every resolve."""

    enumerate: Callable[[], Iterable[Any]] = field(repr=False)

    def resolve(self) -> List[Any]:
        return list(self.enumerate())


def require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise PatternError(f"{what} must be a string", pattern=value)
    return value


class BaseQuery(Generic[T]):
    """Base query class with filter-chain logic.

    Subclasses implement :meth:`_discover` (the live candidate universe) and
    add entity-specific ``where_*`` methods on top of :meth:`where`.
    """

    def __init__(self) -> None:
        self._chain = FilterChain()
        self._explicit: Optional[ExplicitSource] = None

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _clone(self: Q) -> Q:
        return copy.copy(self)

    def where(self: Q, predicate: Predicate, description: Optional[str] = None) -> Q:
        """Filter candidates by an arbitrary predicate.

        Args:
            predicate: Function from candidate to bool
            description: Label used in ``describe()`` and debug logs

        Returns:
            New query with the filter appended
        """
        label = description or getattr(predicate, "__name__", "where")
        new_query = self._clone()
        new_query._chain = self._chain.add_filter(Filter(label, predicate))
        return new_query

    def where_not(self: Q, predicate: Predicate, description: Optional[str] = None) -> Q:
        """Exclude candidates matching ``predicate``."""
        negated = Filter(description or getattr(predicate, "__name__", "where"), predicate)
        return self.where(lambda candidate: not negated(candidate), f"not {negated.description}")

    def or_(self: Q, callback: Callable[[Q], Q]) -> Q:
        """Add an alternative filter chain.

        The callback receives a fresh query of the same kind (same registries,
        no filters) and must return the query it built::

            query.where_name_starts_with("Foo").or_(lambda q: q.where_name_ends_with("Bar"))

        Raises:
            ConfigurationError: If the callback does not return a query of the same kind
        """
        fresh = self._clone()
        fresh._chain = FilterChain()
        built = callback(fresh)
        if not isinstance(built, type(self)):
            raise ConfigurationError(
                "or_() callback must return the query it builds",
                context={"returned": repr(built)},
                suggestions=["Use a lambda: q.or_(lambda sub: sub.where_name_equals('x'))"],
            )
        new_query = self._clone()
        new_query._chain = self._chain.add_branch(built._chain)
        return new_query

    def in_(self: Q, candidates: Iterable[Any]) -> Q:
        """Restrict the query to an explicit candidate list.

        An empty list yields no results; it does not fall back to discovery.
        """
        new_query = self._clone()
        new_query._explicit = ExplicitSource(tuple(self._from_explicit(list(candidates))))
        return new_query

    def _from_explicit(self, candidates: List[Any]) -> List[Any]:
        return candidates

    # ------------------------------------------------------------------
    # Name filters shared by every builder
    # ------------------------------------------------------------------

    def _name_of(self, candidate: Any) -> Optional[str]:
        return qualified_name(candidate)

    def _name_matches(self, candidate: Any, test: Callable[[str], bool]) -> bool:
        name = self._name_of(candidate)
        return name is not None and test(name)

    def where_name_equals(self: Q, pattern: str) -> Q:
        """Filter by name pattern (``*`` matches any run of characters)."""
        matcher = compile_pattern(pattern)
        return self.where(lambda c: self._name_matches(c, matcher), f"name ~ {pattern!r}")

    def where_name_doesnt_equal(self: Q, pattern: str) -> Q:
        """Exclude names matching the pattern; nameless candidates pass."""
        matcher = compile_pattern(pattern)
        return self.where(lambda c: not self._name_matches(c, matcher), f"name !~ {pattern!r}")

    def where_name_starts_with(self: Q, prefix: str) -> Q:
        require_str(prefix, "Prefix")
        return self.where(
            lambda c: self._name_matches(c, lambda name: name.startswith(prefix)),
            f"name starts with {prefix!r}",
        )

    def where_name_ends_with(self: Q, suffix: str) -> Q:
        require_str(suffix, "Suffix")
        return self.where(
            lambda c: self._name_matches(c, lambda name: name.endswith(suffix)),
            f"name ends with {suffix!r}",
        )

    def where_name_contains(self: Q, substring: str) -> Q:
        require_str(substring, "Substring")
        return self.where(
            lambda c: self._name_matches(c, lambda name: substring in name),
            f"name contains {substring!r}",
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _discover(self) -> Iterable[Any]:
        raise NotImplementedError

    def _source(self):
        if self._explicit is not None:
            return self._explicit
        return DiscoveredSource(self._discover)

    def candidates(self) -> List[Any]:
        """The candidate universe before filtering."""
        return self._source().resolve()

    def _iter_matches(self) -> Iterator[Any]:
        chain = self._chain
        for candidate in self.candidates():
            if chain.is_empty or chain.evaluate(candidate):
                yield candidate

    def _present(self, candidate: Any) -> T:
        """Shape of a match in results; the candidate itself by default."""
        return candidate

    def describe(self) -> str:
        """Human-readable rendering of the filter chain."""
        return self._chain.describe()

    def get(self) -> List[T]:
        """Execute query and return all matches in enumeration order."""
        result = [self._present(candidate) for candidate in self._iter_matches()]
        logger.debug(f"{type(self).__name__} [{self.describe()}] -> {len(result)} match(es)")
        return result

    def first(self) -> Optional[T]:
        """Return first match or None.

        Stops at the first match.
        """
        candidate = next(self._iter_matches(), _MISSING)
        return None if candidate is _MISSING else self._present(candidate)

    def exists(self) -> bool:
        """Check if any candidate matches."""
        return next(self._iter_matches(), _MISSING) is not _MISSING

    def count(self) -> int:
        """Count matching candidates."""
        return len(self.get())

    def names(self) -> List[Optional[str]]:
        """Names of the matching candidates."""
        return [self._name_of(candidate) for candidate in self._iter_matches()]

    def __iter__(self) -> Iterator[T]:
        """Iterate over matches."""
        return iter(self.get())

    def __len__(self) -> int:
        """Return count of matches."""
        return self.count()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()}>"
