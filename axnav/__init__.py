"""
axnav -- find, drive, and wait on accessibility elements by short names.

Quick start::

    import axnav

    app = axnav.application(bundle_id="com.apple.mail")
    window = app.focused_window              # attribute lookup (AXFocusedWindow)
    window.title                             # AXTitle
    field = window.text_field(title="Name")  # first AXTextField titled "Name"
    fields = window.text_fields()            # every AXTextField, breadth first
    ok = window.search("button", title="OK") # explicit search
    ok.perform_action("press")               # AXPress
    app.wait_for_notification("AXWindowCreated", timeout=5)

Short names resolve by case-insensitive suffix against the element's own
names; the shortest match wins ("title" -> AXTitle, not AXTitleUIElement).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from axnav._router import detect_platform, get_backend
from axnav.element import DispatchResult, Element
from axnav.errors import (
    AccessibilityError,
    BackendError,
    LookupFailure,
    NotWritable,
    RegistrationFailure,
    SearchTypeUnresolved,
    UnknownAction,
    UnknownAttribute,
    UnknownParamAttribute,
)
from axnav.notifications import wait_for_notification
from axnav.resolver import resolve
from axnav.search import search

if TYPE_CHECKING:
    from axnav._base import AccessibilityBackend

__all__ = [
    "application",
    "system_wide",
    "Element",
    "DispatchResult",
    "search",
    "wait_for_notification",
    "resolve",
    # Errors
    "AccessibilityError",
    "BackendError",
    "LookupFailure",
    "NotWritable",
    "RegistrationFailure",
    "SearchTypeUnresolved",
    "UnknownAction",
    "UnknownAttribute",
    "UnknownParamAttribute",
    # Advanced / building blocks
    "get_backend",
    "detect_platform",
]


# ---------------------------------------------------------------------------
# Default backend (used by the entry points below)
# ---------------------------------------------------------------------------

_default_backend: AccessibilityBackend | None = None


def _get_default_backend() -> AccessibilityBackend:
    global _default_backend
    if _default_backend is None:
        _default_backend = get_backend()
    return _default_backend


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def application(
    pid: int | None = None,
    *,
    bundle_id: str | None = None,
    backend: AccessibilityBackend | None = None,
) -> Element:
    """Return the application element for a process id or bundle identifier.

    Raises:
        ValueError: If neither (or both) of pid and bundle_id are given, or
            no running application has the bundle identifier.
    """
    if (pid is None) == (bundle_id is None):
        raise ValueError("Pass exactly one of pid or bundle_id")
    backend = backend or _get_default_backend()
    if bundle_id is not None:
        pid = backend.pid_for_bundle_id(bundle_id)
        if pid is None:
            raise ValueError(f"No running application with bundle id {bundle_id!r}")
    return Element(backend.application_ref(pid), backend)


def system_wide(*, backend: AccessibilityBackend | None = None) -> Element:
    """Return the system-wide element (root of every application)."""
    backend = backend or _get_default_backend()
    return Element(backend.system_wide_ref(), backend)
