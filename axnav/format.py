"""
Element serialization helpers shared by the CLI and the MCP server.

Elements are addressed by child-index paths from a root: "" is the root
itself, "0.2" is the third child of the root's first child.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from axnav.element import Element
from axnav.errors import AccessibilityError

# Attributes included in describe() output, in display order
_SUMMARY_ATTRIBUTES = (
    "AXRole",
    "AXSubrole",
    "AXTitle",
    "AXDescription",
    "AXValue",
    "AXIdentifier",
    "AXEnabled",
    "AXFocused",
)


def describe(element: Element) -> dict[str, Any]:
    """Return a JSON-safe summary of *element*'s common attributes."""
    summary: dict[str, Any] = {}
    for exact in _SUMMARY_ATTRIBUTES:
        if exact not in element.attributes:
            continue
        try:
            value = element.attribute(exact)
        except AccessibilityError:
            continue
        if value is None or isinstance(value, (str, int, float, bool)):
            summary[exact.removeprefix("AX").lower()] = value
    summary["actions"] = [a.removeprefix("AX").lower() for a in element.actions]
    return summary


def describe_all(elements: Iterable[Element]) -> list[dict[str, Any]]:
    return [describe(e) for e in elements]


def to_json(result: Any) -> str:
    """Serialize an attribute value or search result as JSON text."""
    if isinstance(result, Element):
        result = describe(result)
    elif isinstance(result, list):
        result = [describe(r) if isinstance(r, Element) else r for r in result]
    return json.dumps(result, indent=2, default=repr)


# ---------------------------------------------------------------------------
# Child-index paths
# ---------------------------------------------------------------------------


def parse_path(path: str) -> list[int]:
    """Parse "0.2.1" into [0, 2, 1]; "" is the empty path."""
    path = path.strip()
    if not path:
        return []
    try:
        return [int(p) for p in path.split(".")]
    except ValueError:
        raise ValueError(f"Invalid element path {path!r}: expected dot-separated integers") from None


def element_at(root: Element, path: str) -> Element:
    """Follow a child-index path from *root*.

    Raises:
        ValueError: If the path is malformed or walks past a leaf.
    """
    element = root
    for depth, index in enumerate(parse_path(path)):
        children = element.children()
        if not 0 <= index < len(children):
            raise ValueError(
                f"Element path {path!r}: no child {index} at depth {depth} "
                f"({len(children)} children)"
            )
        element = children[index]
    return element
