"""Fuzzy name resolution for attribute, action, and type identifiers.

Accessibility identifiers are verbose and prefixed ("AXTitleUIElement",
"AXApplicationDockItem").  Callers use short, snake_case names instead
("title_ui_element", "application_dock_item"), which resolve by suffix:

- Underscores and one trailing ``?`` are ignored (``enabled?`` -> ``enabled``)
- Matching is case-insensitive
- A candidate matches if it *ends with* the normalized name
- Among several matches the shortest candidate wins; equal lengths go to
  whichever candidate came first in the candidate order
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize(name: object) -> str:
    """Strip separators and a trailing ``?`` from *name* and case-fold it."""
    text = str(name).replace("_", "")
    if text.endswith("?"):
        text = text[:-1]
    return text.casefold()


def matcher(name: object) -> Callable[[str], bool]:
    """Return a predicate accepting candidates that end with *name*."""
    suffix = normalize(name)

    def _matches(candidate: str) -> bool:
        return bool(suffix) and candidate.casefold().endswith(suffix)

    return _matches


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve(name: object, candidates: Iterable[str]) -> str | None:
    """Resolve a short *name* to one exact identifier from *candidates*.

    Returns None when nothing matches.
    """
    accepts = matcher(name)
    best: str | None = None
    for candidate in candidates:
        if not accepts(candidate):
            continue
        # strict < keeps the first of several equally short matches
        if best is None or len(candidate) < len(best):
            best = candidate
    return best


# ---------------------------------------------------------------------------
# Type-name helpers
# ---------------------------------------------------------------------------

_CAMEL_SPLIT_RE = re.compile(r"_+")


def camelize(name: object) -> str:
    """Turn ``snake_case`` into ``CamelCase``; CamelCase input is unchanged.

    >>> camelize("application_dock_item")
    'ApplicationDockItem'
    """
    parts = [p for p in _CAMEL_SPLIT_RE.split(str(name)) if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


def is_plural(name: object) -> bool:
    return str(name).endswith("s")


def singularize(name: object) -> str:
    """Drop the plural ``s`` from a search type name, if present."""
    text = str(name)
    return text[:-1] if text.endswith("s") else text
