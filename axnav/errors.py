"""Error taxonomy for element lookup, search, and notification waits."""

from __future__ import annotations

from typing import Any


class AccessibilityError(Exception):
    """Base class for every error raised by axnav."""


class LookupFailure(AccessibilityError, ValueError):
    """A short name did not resolve to anything the element understands."""

    def __init__(self, element: Any, name: Any) -> None:
        self.element = element
        self.name = name
        super().__init__(f"{name!r} was not found for {element!r}")


class UnknownAttribute(LookupFailure):
    """No attribute of the element matches the requested name."""


class UnknownAction(LookupFailure):
    """No action of the element matches the requested name."""


class UnknownParamAttribute(LookupFailure):
    """No parameterized attribute of the element matches the requested name."""


class SearchTypeUnresolved(LookupFailure):
    """The requested search type matches no known element type."""


class NotWritable(AccessibilityError, ValueError):
    """The attribute exists but the backend reports it as read-only."""

    def __init__(self, element: Any, name: str) -> None:
        self.element = element
        self.name = name
        super().__init__(f"{name!r} is not writable for {element!r}")


class RegistrationFailure(AccessibilityError, RuntimeError):
    """The backend refused to register interest in a notification."""

    def __init__(self, notification: str, reason: str = "") -> None:
        self.notification = notification
        message = f"could not register for {notification!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class BackendError(AccessibilityError, RuntimeError):
    """A backend call returned a non-success status code."""

    def __init__(self, operation: str, code: int) -> None:
        self.operation = operation
        self.code = code
        super().__init__(f"{operation} failed with AX error {code}")
