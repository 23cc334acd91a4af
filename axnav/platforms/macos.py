"""
macOS AXUIElement backend for axnav.

Reads, writes, and observes the live accessibility hierarchy via the pyobjc
AXUIElement and AXObserver APIs.  Notification waits pump the calling
thread's CFRunLoop.

Requires macOS accessibility permissions:
  System Settings > Privacy & Security > Accessibility > (add Terminal / Python)

Dependencies:
  pip install pyobjc-framework-ApplicationServices pyobjc-framework-Cocoa
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

from AppKit import NSWorkspace
from ApplicationServices import (
    AXIsProcessTrusted,
    AXObserverAddNotification,
    AXObserverCreate,
    AXObserverGetRunLoopSource,
    AXObserverRemoveNotification,
    AXUIElementCopyActionNames,
    AXUIElementCopyAttributeNames,
    AXUIElementCopyAttributeValue,
    AXUIElementCopyParameterizedAttributeNames,
    AXUIElementCopyParameterizedAttributeValue,
    AXUIElementCreateApplication,
    AXUIElementCreateSystemWide,
    AXUIElementGetPid,
    AXUIElementIsAttributeSettable,
    AXUIElementPerformAction,
    AXUIElementSetAttributeValue,
    kAXErrorSuccess,
)
from CoreFoundation import (
    CFRunLoopAddSource,
    CFRunLoopGetCurrent,
    CFRunLoopRemoveSource,
    CFRunLoopRunInMode,
    kCFRunLoopDefaultMode,
)

from axnav._base import AccessibilityBackend, NotificationCallback
from axnav.errors import BackendError, RegistrationFailure

logger = logging.getLogger(__name__)

# Native class of AXUIElementRef values as bridged by pyobjc
_AX_ELEMENT_CLASS = type(AXUIElementCreateSystemWide())

# AXError returned when an attribute/action list is simply empty
_AX_ERROR_NO_VALUE = -25212


# ---------------------------------------------------------------------------
# AX call helpers
# ---------------------------------------------------------------------------


def _check(operation: str, err: int) -> None:
    if err != kAXErrorSuccess:
        raise BackendError(operation, err)


def _names(operation: str, err: int, names) -> list[str]:
    if err == _AX_ERROR_NO_VALUE or names is None:
        return []
    _check(operation, err)
    return [str(n) for n in names]


def _to_python(value: Any) -> Any:
    """Convert NSArray values to lists; everything else passes through."""
    if value is None or isinstance(value, (str, _AX_ELEMENT_CLASS)):
        return value
    if hasattr(value, "objectAtIndex_"):
        return [_to_python(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Observer registrations
# ---------------------------------------------------------------------------


@dataclass
class _Registration:
    observer: Any
    ref: Any
    name: str
    source: Any
    run_loop: Any
    # keep the bridged callback alive for as long as the observer
    trampoline: Any


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


class MacosBackend(AccessibilityBackend):
    """AXUIElement-backed access to the live macOS hierarchy."""

    def __init__(self) -> None:
        self._initialized = False

    @property
    def platform_name(self) -> str:
        return "macos"

    def initialize(self) -> None:
        if self._initialized:
            return
        if not AXIsProcessTrusted():
            logger.warning(
                "Process is not trusted for accessibility; grant access in "
                "System Settings > Privacy & Security > Accessibility"
            )
        self._initialized = True

    # ---- roots -----------------------------------------------------------

    def application_ref(self, pid: int) -> Any:
        return AXUIElementCreateApplication(pid)

    def system_wide_ref(self) -> Any:
        return AXUIElementCreateSystemWide()

    def pid_for_bundle_id(self, bundle_id: str) -> int | None:
        for app in NSWorkspace.sharedWorkspace().runningApplications():
            if app.bundleIdentifier() == bundle_id:
                return int(app.processIdentifier())
        return None

    # ---- name sets -------------------------------------------------------

    def list_attribute_names(self, ref: Any) -> list[str]:
        err, names = AXUIElementCopyAttributeNames(ref, None)
        return _names("AXUIElementCopyAttributeNames", err, names)

    def list_action_names(self, ref: Any) -> list[str]:
        err, names = AXUIElementCopyActionNames(ref, None)
        return _names("AXUIElementCopyActionNames", err, names)

    def list_param_attribute_names(self, ref: Any) -> list[str]:
        err, names = AXUIElementCopyParameterizedAttributeNames(ref, None)
        return _names("AXUIElementCopyParameterizedAttributeNames", err, names)

    # ---- reads, writes, actions -----------------------------------------

    def read_attribute(self, ref: Any, name: str) -> Any:
        err, value = AXUIElementCopyAttributeValue(ref, name, None)
        if err == _AX_ERROR_NO_VALUE:
            return None
        _check(f"read {name}", err)
        return _to_python(value)

    def is_attribute_writable(self, ref: Any, name: str) -> bool:
        err, settable = AXUIElementIsAttributeSettable(ref, name, None)
        _check(f"settable {name}", err)
        return bool(settable)

    def write_attribute(self, ref: Any, name: str, value: Any) -> None:
        _check(f"write {name}", AXUIElementSetAttributeValue(ref, name, value))

    def invoke_action(self, ref: Any, name: str) -> bool:
        return AXUIElementPerformAction(ref, name) == kAXErrorSuccess

    def read_param_attribute(self, ref: Any, name: str, param: Any) -> Any:
        err, value = AXUIElementCopyParameterizedAttributeValue(ref, name, param, None)
        _check(f"read {name}", err)
        return _to_python(value)

    def pid_of(self, ref: Any) -> int:
        err, pid = AXUIElementGetPid(ref, None)
        _check("AXUIElementGetPid", err)
        return int(pid)

    def is_element_ref(self, value: Any) -> bool:
        return isinstance(value, _AX_ELEMENT_CLASS)

    # ---- notifications ---------------------------------------------------

    def register_notification(
        self,
        ref: Any,
        name: str,
        callback: NotificationCallback,
    ) -> _Registration:
        def _trampoline(observer, element, notification, refcon):
            callback(element, str(notification))

        err, observer = AXObserverCreate(self.pid_of(ref), _trampoline, None)
        if err != kAXErrorSuccess or observer is None:
            raise RegistrationFailure(name, f"AXObserverCreate returned {err}")

        err = AXObserverAddNotification(observer, ref, name, None)
        if err != kAXErrorSuccess:
            raise RegistrationFailure(name, f"AXObserverAddNotification returned {err}")

        run_loop = CFRunLoopGetCurrent()
        source = AXObserverGetRunLoopSource(observer)
        CFRunLoopAddSource(run_loop, source, kCFRunLoopDefaultMode)
        return _Registration(observer, ref, name, source, run_loop, _trampoline)

    def deregister(self, handle: _Registration) -> None:
        CFRunLoopRemoveSource(handle.run_loop, handle.source, kCFRunLoopDefaultMode)
        err = AXObserverRemoveNotification(handle.observer, handle.ref, handle.name)
        if err != kAXErrorSuccess:
            # the element may already be gone; the observer dies with the handle
            logger.warning("AXObserverRemoveNotification(%s) returned %s", handle.name, err)

    def run_until(self, fired: threading.Event, timeout: float) -> bool:
        deadline = time.monotonic() + timeout
        while not fired.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            # returnAfterSourceHandled=True: come back after each callback
            CFRunLoopRunInMode(kCFRunLoopDefaultMode, remaining, True)
        return fired.is_set()
