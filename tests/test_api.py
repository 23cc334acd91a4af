"""Tests for the package entry points."""

from __future__ import annotations

import pytest

import axnav
from axnav.platforms.memory import MemoryBackend, MemoryNode


def _backend() -> MemoryBackend:
    backend = MemoryBackend()
    backend.add_application(
        11,
        MemoryNode("AXApplication", attributes={"AXTitle": "Mail"}, children=[]),
        bundle_id="com.apple.mail",
    )
    backend.add_application(12, MemoryNode("AXApplication", attributes={"AXTitle": "Finder"}))
    return backend


class TestApplication:
    def test_by_pid(self):
        app = axnav.application(12, backend=_backend())
        assert app.title == "Finder"
        assert app.pid == 12

    def test_by_bundle_id(self):
        app = axnav.application(bundle_id="com.apple.mail", backend=_backend())
        assert app.title == "Mail"

    def test_unknown_bundle_id(self):
        with pytest.raises(ValueError, match="com.example.none"):
            axnav.application(bundle_id="com.example.none", backend=_backend())

    def test_requires_exactly_one_selector(self):
        with pytest.raises(ValueError):
            axnav.application(backend=_backend())
        with pytest.raises(ValueError):
            axnav.application(11, bundle_id="com.apple.mail", backend=_backend())

    def test_unknown_pid(self):
        with pytest.raises(axnav.BackendError):
            axnav.application(99, backend=_backend())


class TestSystemWide:
    def test_children_are_applications(self):
        system = axnav.system_wide(backend=_backend())
        assert system.role == "AXSystemWide"
        assert [a.title for a in system.applications()] == ["Mail", "Finder"]

    def test_default_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("AXNAV_PLATFORM", "memory")
        monkeypatch.setattr(axnav, "_default_backend", None)
        assert axnav.system_wide().role == "AXSystemWide"
