"""Docstring scanning.

Pulls the description and the documented parameters, return value and
exceptions out of a docstring with :mod:`docstring_parser`, which detects the
style (reST field lists, Google, NumPy or Epydoc) on its own.
"""

import inspect
import logging
from typing import Any, Dict, Optional

from docstring_parser import Docstring, ParseError
from docstring_parser import parse as parse_docstring

logger = logging.getLogger(__name__)


def _one_line(text: Optional[str]) -> str:
    return " ".join((text or "").split())


def _description(parsed: Docstring) -> Optional[str]:
    parts = [p for p in (parsed.short_description, parsed.long_description) if p]
    if not parts:
        return None
    separator = "\n\n" if parsed.blank_after_short_description else "\n"
    return separator.join(parts).strip()


def parse(doc: Optional[str]) -> Optional[Dict[str, Any]]:
    """Split a docstring into its parts.

    Returns:
        ``{"description", "params", "returns", "raises"}`` or ``None`` for an
        empty docstring. ``params`` maps names to descriptions, ``raises`` maps
        exception names to descriptions. Entry descriptions are joined onto one
        line. A docstring the parser rejects is kept whole as the description.
    """
    if not doc or not doc.strip():
        return None
    text = inspect.cleandoc(doc)
    try:
        parsed = parse_docstring(text)
    except ParseError as e:
        logger.debug(f"Cannot parse docstring sections: {e}")
        return {"description": text, "params": {}, "returns": None, "raises": {}}

    returns = parsed.returns
    return {
        "description": _description(parsed),
        "params": {p.arg_name: _one_line(p.description) for p in parsed.params},
        "returns": (_one_line(returns.description) or None) if returns else None,
        "raises": {(r.type_name or "Exception"): _one_line(r.description) for r in parsed.raises},
    }


def summary(doc: Optional[str]) -> Optional[str]:
    """First paragraph of a docstring on one line."""
    parsed = parse(doc)
    if parsed is None or not parsed["description"]:
        return None
    return _one_line(parsed["description"].split("\n\n", 1)[0])
