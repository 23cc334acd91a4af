"""Breadth-first element search.

Searches the live hierarchy below a root element with:
- Type matching by short name ("button", "application_dock_item")
- Attribute filters resolved per candidate ({"title": "OK", "enabled?": True})
- Singular/plural semantics from the type name ("button" vs "buttons")

Examples::

    search(window, "button")                    # first AXButton, or None
    search(window, "buttons", {"enabled": True}) # every enabled AXButton
    search(dock, "application_dock_item", {"title": "Finder"})
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from axnav.errors import SearchTypeUnresolved, UnknownAttribute
from axnav.resolver import camelize, is_plural, resolve, singularize

if TYPE_CHECKING:
    from axnav.element import Element

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Type resolution
# ---------------------------------------------------------------------------


def resolve_type(root: Element, element_type: str) -> str:
    """Resolve a singular search type name to a known type identifier.

    Raises:
        SearchTypeUnresolved: If no known type ends with the name.
    """
    exact = resolve(camelize(element_type), root.backend.known_types())
    if exact is None:
        raise SearchTypeUnresolved(root, element_type)
    return exact


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def matches_filters(element: Element, filters: Mapping[str, Any]) -> bool:
    """True if every filter key resolves on *element* and equals its value.

    A key that is not an attribute of *element* fails the match rather
    than raising.
    """
    for key, expected in filters.items():
        try:
            actual = element.get_attribute(key)
        except UnknownAttribute:
            logger.debug("Skipping %r: no attribute for filter %r", element, key)
            return False
        if actual != expected:
            return False
    return True


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def search(
    root: Element,
    element_type: str,
    filters: Mapping[str, Any] | None = None,
) -> Element | list[Element] | None:
    """Search the hierarchy below *root*, breadth first.

    Args:
        root: Element to search from (not itself a candidate).
        element_type: Short type name.  A trailing "s" asks for every
            match instead of the first one.
        filters: Short attribute names mapped to the values a match must
            have.  Empty or None matches every element of the type.

    Returns:
        Singular queries: the first match in breadth-first order, or None.
        Plural queries: a list of all matches, possibly empty.

    Raises:
        SearchTypeUnresolved: If the type name matches no known type.
    """
    plural = is_plural(element_type)
    if plural:
        try:
            target = resolve_type(root, singularize(element_type))
        except SearchTypeUnresolved:
            # singular type names that end in "s" ("application_status")
            target = resolve_type(root, element_type)
            plural = False
    else:
        target = resolve_type(root, element_type)
    filters = filters or {}
    results: list[Element] = []

    frontier: deque[Element] = deque(root.children())
    while frontier:
        element = frontier.popleft()
        # enqueue before testing so siblings are always visited before grandchildren
        frontier.extend(element.children())

        if not element.is_a(target):
            continue
        if not matches_filters(element, filters):
            continue

        if not plural:
            return element
        results.append(element)

    logger.debug(
        "search %r below %r: %d match(es)", element_type, root, len(results)
    )
    return results if plural else None
