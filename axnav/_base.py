"""Abstract base for accessibility backends."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from axnav.roles import KNOWN_TYPES

CHILDREN_ATTRIBUTE = "AXChildren"
ROLE_ATTRIBUTE = "AXRole"
SUBROLE_ATTRIBUTE = "AXSubrole"

# Callback signature handed to register_notification: (sender_ref, name)
NotificationCallback = Callable[[Any, str], None]


class AccessibilityBackend(ABC):
    """Interface to the raw accessibility API of one platform.

    Backends own every call that touches a native element reference.  The
    element, search, and notification layers call only the methods defined
    here and never interpret native refs themselves.
    """

    # ---- identity --------------------------------------------------------

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the backend identifier ('macos', 'memory')."""
        ...

    # ---- lifecycle -------------------------------------------------------

    @abstractmethod
    def initialize(self) -> None:
        """Perform any one-time setup.

        Called once by the router before the backend is handed out.
        Implementations should be idempotent.
        """
        ...

    # ---- roots -----------------------------------------------------------

    @abstractmethod
    def application_ref(self, pid: int) -> Any:
        """Return the native ref for the application with process id *pid*."""
        ...

    @abstractmethod
    def system_wide_ref(self) -> Any:
        """Return the native ref for the system-wide element."""
        ...

    def pid_for_bundle_id(self, bundle_id: str) -> int | None:
        """Return the pid of the running application with *bundle_id*, if any."""
        return None

    # ---- name sets -------------------------------------------------------

    @abstractmethod
    def list_attribute_names(self, ref: Any) -> Sequence[str]:
        """Return the exact attribute names of *ref*, in backend order."""
        ...

    @abstractmethod
    def list_action_names(self, ref: Any) -> Sequence[str]:
        """Return the exact action names of *ref*, in backend order."""
        ...

    @abstractmethod
    def list_param_attribute_names(self, ref: Any) -> Sequence[str]:
        """Return the exact parameterized attribute names of *ref*."""
        ...

    # ---- reads, writes, actions -----------------------------------------

    @abstractmethod
    def read_attribute(self, ref: Any, name: str) -> Any:
        """Return the value of attribute *name* (an exact name).

        Element refs inside the value are returned as native refs; the
        element layer wraps them.
        """
        ...

    @abstractmethod
    def is_attribute_writable(self, ref: Any, name: str) -> bool:
        ...

    @abstractmethod
    def write_attribute(self, ref: Any, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def invoke_action(self, ref: Any, name: str) -> bool:
        """Perform action *name*; return True if the backend reports success."""
        ...

    @abstractmethod
    def read_param_attribute(self, ref: Any, name: str, param: Any) -> Any:
        ...

    @abstractmethod
    def pid_of(self, ref: Any) -> int:
        ...

    # ---- ref identity ----------------------------------------------------

    @abstractmethod
    def is_element_ref(self, value: Any) -> bool:
        """Return True if *value* is a native element reference."""
        ...

    def same_element(self, a: Any, b: Any) -> bool:
        return a == b

    def children_of(self, ref: Any) -> list[Any]:
        """Return the native child refs of *ref* (empty for leaves)."""
        children = self.read_attribute(ref, CHILDREN_ATTRIBUTE)
        return list(children) if children else []

    # ---- types -----------------------------------------------------------

    def known_types(self) -> Sequence[str]:
        """Return the universe of element type identifiers, tie-break ordered."""
        return KNOWN_TYPES

    # ---- notifications ---------------------------------------------------

    @abstractmethod
    def register_notification(
        self,
        ref: Any,
        name: str,
        callback: NotificationCallback,
    ) -> Any:
        """Register *callback* for notification *name* on *ref*.

        Returns an opaque registration handle for deregister().

        Raises:
            RegistrationFailure: If the platform rejects the registration.
        """
        ...

    @abstractmethod
    def deregister(self, handle: Any) -> None:
        """Undo a registration made by register_notification()."""
        ...

    @abstractmethod
    def run_until(self, fired: threading.Event, timeout: float) -> bool:
        """Pump the backend's event source until *fired* is set or *timeout* elapses.

        Returns True if *fired* was set before the timeout.
        """
        ...
