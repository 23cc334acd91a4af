"""Platform auto-detection and backend dispatch."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from axnav._base import AccessibilityBackend


def detect_platform() -> str:
    """Return the backend identifier for the current platform.

    AXNAV_PLATFORM, when set, overrides sys.platform detection.
    """
    forced = os.environ.get("AXNAV_PLATFORM")
    if forced:
        return forced
    if sys.platform == "darwin":
        return "macos"
    raise RuntimeError(f"Unsupported platform: {sys.platform}")


def get_backend(platform: str | None = None) -> AccessibilityBackend:
    """Return a fresh, initialized backend instance.

    Args:
        platform: Force a specific backend ('macos', 'memory').
                  If None, uses detect_platform().

    Raises:
        RuntimeError: If the platform is unsupported or dependencies are missing.
    """
    if platform is None:
        platform = detect_platform()

    if platform == "macos":
        from axnav.platforms.macos import MacosBackend

        backend = MacosBackend()
    elif platform == "memory":
        from axnav.platforms.memory import MemoryBackend

        backend = MemoryBackend()
    else:
        raise RuntimeError(
            f"No backend available for platform '{platform}'. "
            f"Currently supported: macos, memory."
        )

    backend.initialize()
    return backend
