"""axnav MCP Server: accessibility element tools for AI agents.

Exposes focused tools for element search, attribute reads and writes,
actions, and notification waits.
"""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp import FastMCP

import axnav
from axnav._base import AccessibilityBackend
from axnav.errors import AccessibilityError
from axnav.format import describe, element_at, to_json

mcp = FastMCP(
    name="axnav",
    instructions=(
        "axnav gives you access to the accessibility hierarchy of running "
        "applications.\n\n"
        "WORKFLOW (follow this pattern):\n"
        "1. find to locate elements by type and attribute filters\n"
        "2. get_attribute / set_attribute / perform_action on an element path\n"
        "3. wait to block until the UI reports a change\n\n"
        "Names are short and fuzzy: 'title' means AXTitle, 'press' means "
        "AXPress, 'text_fields' means every AXTextField.\n\n"
        "Element paths are child indexes from the application root "
        "('' is the app, '0.2' is the third child of its first child). Paths "
        "are only valid until the UI changes."
    ),
)

# ---------------------------------------------------------------------------
# Backend state (one per MCP server process)
# ---------------------------------------------------------------------------

_backend: AccessibilityBackend | None = None


def _get_backend() -> AccessibilityBackend:
    global _backend
    if _backend is None:
        _backend = axnav.get_backend()
    return _backend


def _error(exc: Exception) -> str:
    return json.dumps({"success": False, "message": "", "error": str(exc)})


def _target(pid: int, path: str) -> axnav.Element:
    return element_at(axnav.application(pid, backend=_get_backend()), path)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def find(pid: int, element_type: str, filters: dict[str, Any] | None = None, path: str = "") -> str:
    """Search an application's hierarchy, breadth first.

    A singular type ("button") returns the first match or null; a plural
    type ("buttons") returns every match.

    Args:
        pid: Application process id.
        element_type: Short type name (button, text_field, rows, ...).
        filters: Attribute filters, e.g. {"title": "OK", "enabled": true}.
        path: Element path to search below (default: the application).
    """
    try:
        return to_json(_target(pid, path).search(element_type, filters or {}))
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)


@mcp.tool()
def inspect(pid: int, path: str = "") -> str:
    """Describe one element and list its children.

    Args:
        pid: Application process id.
        path: Element path (default: the application).
    """
    try:
        element = _target(pid, path)
        summary = describe(element)
        summary["children"] = [describe(c) for c in element.children()]
        return json.dumps(summary, indent=2, default=repr)
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)


@mcp.tool()
def get_attribute(pid: int, name: str, path: str = "") -> str:
    """Read an attribute by short name ("title", "value", "focused_window").

    Args:
        pid: Application process id.
        name: Short attribute name.
        path: Element path (default: the application).
    """
    try:
        return to_json(_target(pid, path).get_attribute(name))
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)


@mcp.tool()
def set_attribute(pid: int, name: str, value: Any, path: str = "") -> str:
    """Write an attribute by short name ("value", "focused", "main").

    Args:
        pid: Application process id.
        name: Short attribute name.
        value: New value.
        path: Element path (default: the application).
    """
    try:
        _target(pid, path).set_attribute(name, value)
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)
    return json.dumps({"success": True, "message": f"Set {name}"})


@mcp.tool()
def perform_action(pid: int, name: str, path: str = "") -> str:
    """Perform an action by short name ("press", "raise", "show_menu").

    Element paths may be invalid afterwards; search again before reusing.

    Args:
        pid: Application process id.
        name: Short action name.
        path: Element path (default: the application).
    """
    try:
        ok = _target(pid, path).perform_action(name)
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)
    return json.dumps({"success": ok, "message": f"Performed {name}" if ok else ""})


@mcp.tool()
def wait(pid: int, notification: str, timeout: float | None = None, path: str = "") -> str:
    """Block until a notification fires on an element, or the timeout elapses.

    Args:
        pid: Application process id.
        notification: Exact notification name (e.g. "AXWindowCreated").
        timeout: Seconds to wait (default: AXNAV_NOTIFICATION_TIMEOUT or 10).
        path: Element path to observe (default: the application).
    """
    try:
        fired = _target(pid, path).wait_for_notification(notification, timeout)
    except (AccessibilityError, ValueError) as exc:
        return _error(exc)
    return json.dumps({"success": True, "fired": fired})


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
