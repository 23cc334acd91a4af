"""Blocking waits for accessibility notifications.

Notifications are a way to put non-polling delays into automation: press a
button, then wait for the window it opens instead of sleeping::

    button.perform_action("press")
    app.wait_for_notification("AXWindowCreated", timeout=5)

Each wait is one-shot: it registers interest with the backend, runs the
backend's event loop until the first callback or the timeout, and always
deregisters before returning.
"""

from __future__ import annotations

import contextlib
import logging
import os
import threading
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from axnav.errors import AccessibilityError, RegistrationFailure

if TYPE_CHECKING:
    from axnav._base import AccessibilityBackend, NotificationCallback
    from axnav.element import Element

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def default_timeout() -> float:
    """Return the wait timeout from AXNAV_NOTIFICATION_TIMEOUT (seconds)."""
    raw = os.environ.get("AXNAV_NOTIFICATION_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid AXNAV_NOTIFICATION_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT


@contextlib.contextmanager
def registered(
    backend: AccessibilityBackend,
    ref: Any,
    notification: str,
    callback: NotificationCallback,
) -> Iterator[Any]:
    """Register *callback* for *notification* and deregister on exit."""
    try:
        handle = backend.register_notification(ref, notification, callback)
    except RegistrationFailure:
        raise
    except AccessibilityError as exc:
        raise RegistrationFailure(notification, str(exc)) from exc
    logger.debug("Registered for %s", notification)
    try:
        yield handle
    finally:
        backend.deregister(handle)
        logger.debug("Deregistered from %s", notification)


def wait_for_notification(
    element: Element,
    notification: str,
    timeout: float | None = None,
    on_fire: Callable[[Element, str], Any] | None = None,
) -> bool:
    """Wait for *notification* on *element*.

    Args:
        element: Element to observe.
        notification: Exact notification name (e.g. "AXValueChanged").
        timeout: Seconds to wait; None uses default_timeout().
        on_fire: Called once with (sender, notification) when the
            notification arrives, before this function returns.

    Returns:
        True if the notification fired, False on timeout.

    Raises:
        RegistrationFailure: If the backend rejects the registration.
    """
    if timeout is None:
        timeout = default_timeout()

    fired = threading.Event()
    lock = threading.Lock()
    received: list[tuple[Any, str]] = []

    def _callback(sender: Any, name: str) -> None:
        # one-shot: later deliveries before deregistration are dropped
        with lock:
            if fired.is_set():
                return
            received.append((sender, name))
            fired.set()

    backend = element.backend
    with registered(backend, element.ref, notification, _callback):
        if not backend.run_until(fired, timeout):
            logger.debug("Timed out after %.2fs waiting for %s", timeout, notification)
            return False
        if on_fire is not None:
            sender, name = received[0]
            on_fire(element if sender is None else element.wrap(sender), name)
        return True
