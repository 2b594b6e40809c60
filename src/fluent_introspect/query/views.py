"""View query over a :class:`~fluent_introspect.registries.FileViewFinder`."""

from __future__ import annotations

from typing import Any, List, Optional

from .. import templates
from ..patterns import compile_pattern
from ..registries import FileViewFinder
from .base import BaseQuery


class ViewsQuery(BaseQuery):
    """Query template views by name and by include/extends relationships.

    Relationship filters scan template source for directives (see
    :mod:`fluent_introspect.templates`); they are text heuristics.

    Example:
        Introspect.views(finder) \\
            .where_extends("layouts.app") \\
            .where_name_starts_with("admin.") \\
            .get()
    """

    def __init__(self, finder: FileViewFinder):
        super().__init__()
        self.finder = finder

    def _discover(self) -> List[str]:
        return self.finder.views()

    def _name_of(self, candidate: Any) -> Optional[str]:
        return candidate if isinstance(candidate, str) else None

    def _content(self, view: str) -> Optional[str]:
        return self.finder.content(view)

    def includes(self, view: str) -> List[str]:
        """Views included by ``view``; empty when it cannot be read."""
        content = self._content(view)
        if content is None:
            return []
        return templates.included_views(content, self.finder.syntax)

    def extends(self, view: str) -> Optional[str]:
        """The layout ``view`` extends, or ``None``."""
        content = self._content(view)
        if content is None:
            return None
        return templates.extended_view(content, self.finder.syntax)

    def _uses(self, view: str, pattern: str) -> bool:
        matcher = compile_pattern(pattern)
        return any(matcher(included) for included in self.includes(view))

    def _used_by(self, view: str, parent_pattern: str) -> bool:
        matcher = compile_pattern(parent_pattern)
        return any(
            self._uses(parent, view) for parent in self.finder.views() if matcher(parent)
        )

    def _extends(self, view: str, pattern: str) -> bool:
        layout = self.extends(view)
        return layout is not None and compile_pattern(pattern)(layout)

    def where_uses(self, pattern: str) -> "ViewsQuery":
        """Views that include a view matching ``pattern``."""
        compile_pattern(pattern)
        return self.where(lambda v: self._uses(v, pattern), f"uses {pattern!r}")

    def where_doesnt_use(self, pattern: str) -> "ViewsQuery":
        compile_pattern(pattern)
        return self.where_not(lambda v: self._uses(v, pattern), f"uses {pattern!r}")

    def where_used_by(self, parent_pattern: str) -> "ViewsQuery":
        """Views included by some view matching ``parent_pattern``."""
        compile_pattern(parent_pattern)
        return self.where(
            lambda v: self._used_by(v, parent_pattern), f"used by {parent_pattern!r}"
        )

    def where_not_used_by(self, parent_pattern: str) -> "ViewsQuery":
        compile_pattern(parent_pattern)
        return self.where_not(
            lambda v: self._used_by(v, parent_pattern), f"used by {parent_pattern!r}"
        )

    def where_extends(self, pattern: str) -> "ViewsQuery":
        compile_pattern(pattern)
        return self.where(lambda v: self._extends(v, pattern), f"extends {pattern!r}")

    def where_doesnt_extend(self, pattern: str) -> "ViewsQuery":
        compile_pattern(pattern)
        return self.where_not(lambda v: self._extends(v, pattern), f"extends {pattern!r}")
