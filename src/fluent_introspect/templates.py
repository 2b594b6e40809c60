"""Best-effort template directive scanning.

These helpers scrape include and extends directives out of raw template
source with regular expressions. They are text heuristics, not template
parsers: directives inside comments are still reported, and names built
dynamically at render time are invisible.

Two syntaxes are understood:

- ``jinja``: ``{% include "partials/nav.html" %}``, ``{% import %}``,
  ``{% from ... import %}`` and ``{% extends "layouts/app.html" %}``.
  Template paths are reported as dotted view names (``partials.nav``).
- ``blade``: ``@include('partials.nav')`` and its ``If``/``When``/
  ``Unless``/``First`` variants, ``@each`` and ``@extends``.
"""

import re
from typing import Dict, List, Optional, Tuple

JINJA = "jinja"
BLADE = "blade"
SYNTAXES = (JINJA, BLADE)

DEFAULT_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    JINJA: (".html", ".jinja", ".jinja2", ".j2"),
    BLADE: (".blade.php", ".php"),
}

_QUOTED = r"""['"]([^'"]+)['"]"""

_JINJA_USES = re.compile(r"\{%-?\s*(?:include|import|from)\s+" + _QUOTED)
_JINJA_EXTENDS = re.compile(r"\{%-?\s*extends\s+" + _QUOTED)

# @includeWhen/@includeUnless take the condition first
_BLADE_USES = re.compile(
    r"@(?:include(?:If|First)?|each)\s*\(\s*\[?\s*" + _QUOTED
    + r"|@include(?:When|Unless)\s*\([^,]*,\s*" + _QUOTED
)
_BLADE_EXTENDS = re.compile(r"@extends\s*\(\s*" + _QUOTED)


def view_name(reference: str, syntax: str = JINJA) -> str:
    """Normalise a referenced template to a dotted view name."""
    if syntax != JINJA or "::" in reference:
        return reference
    name = reference.lstrip("/")
    for ext in sorted(DEFAULT_EXTENSIONS[JINJA], key=len, reverse=True):
        if name.endswith(ext):
            name = name[: -len(ext)]
            break
    return name.replace("/", ".")


def included_views(content: str, syntax: str = JINJA) -> List[str]:
    """Views included by a template, in source order."""
    if syntax == BLADE:
        return [first or second for first, second in _BLADE_USES.findall(content)]
    return [view_name(ref, syntax) for ref in _JINJA_USES.findall(content)]


def extended_view(content: str, syntax: str = JINJA) -> Optional[str]:
    """The layout a template extends, or ``None``."""
    pattern = _BLADE_EXTENDS if syntax == BLADE else _JINJA_EXTENDS
    match = pattern.search(content)
    if match is None:
        return None
    return view_name(match.group(1), syntax)
