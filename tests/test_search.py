"""Tests for breadth-first element search."""

from __future__ import annotations

import pytest

from axnav.element import Element
from axnav.errors import BackendError, SearchTypeUnresolved
from axnav.platforms.memory import MemoryBackend, MemoryNode
from axnav.search import matches_filters, resolve_type, search

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _n(role: str, title: str | None = None, *, children=None, **attributes) -> MemoryNode:
    """Shorthand node builder."""
    attrs = dict(attributes)
    if title is not None:
        attrs["AXTitle"] = title
    return MemoryNode(role, attributes=attrs, children=children)


def _root(*children: MemoryNode, backend: MemoryBackend | None = None) -> Element:
    backend = backend or MemoryBackend()
    app = MemoryNode("AXApplication", attributes={"AXTitle": "App"}, children=children)
    backend.add_application(1, app)
    return Element(app, backend)


def _titles(results) -> list[str]:
    return [r.get_attribute("title") for r in results]


def _tree() -> Element:
    """
    app
    ├── window "Main"
    │   ├── group
    │   │   └── button "Deep"
    │   ├── button "Top" (enabled)
    │   └── text_field "Name"
    └── window "Other"
        └── button "Cancel" (disabled)
    """
    main = MemoryNode(
        "AXWindow",
        subrole="AXStandardWindow",
        attributes={"AXTitle": "Main"},
        children=[
            _n("AXGroup", children=[_n("AXButton", "Deep")]),
            _n("AXButton", "Top", AXEnabled=True),
            _n("AXTextField", "Name"),
        ],
    )
    other = MemoryNode(
        "AXWindow",
        subrole="AXDialog",
        attributes={"AXTitle": "Other"},
        children=[_n("AXButton", "Cancel", AXEnabled=False)],
    )
    return _root(main, other)


# ---------------------------------------------------------------------------
# Type resolution
# ---------------------------------------------------------------------------


class TestResolveType:
    def test_simple(self):
        assert resolve_type(_tree(), "button") == "AXButton"

    def test_snake_case(self):
        assert resolve_type(_tree(), "application_dock_item") == "AXApplicationDockItem"
        assert resolve_type(_tree(), "text_field") == "AXTextField"

    def test_shortest_type_wins(self):
        # AXCloseButton, AXMenuButton, ... also end with "button"
        assert resolve_type(_tree(), "Button") == "AXButton"

    def test_unresolved(self):
        with pytest.raises(SearchTypeUnresolved):
            resolve_type(_tree(), "flux_capacitor")

    def test_extra_types(self):
        backend = MemoryBackend(extra_types=["AXFluxCapacitor"])
        assert resolve_type(_root(backend=backend), "flux_capacitor") == "AXFluxCapacitor"


# ---------------------------------------------------------------------------
# Cardinality
# ---------------------------------------------------------------------------


class TestCardinality:
    def test_singular_returns_first_match(self):
        result = search(_tree(), "button")
        assert isinstance(result, Element)
        assert result.get_attribute("title") == "Top"

    def test_plural_returns_all_matches(self):
        assert _titles(search(_tree(), "buttons")) == ["Top", "Cancel", "Deep"]

    def test_singular_not_found(self):
        assert search(_tree(), "slider") is None

    def test_plural_not_found(self):
        assert search(_tree(), "sliders") == []

    def test_singular_is_first_plural_result(self):
        root = _tree()
        assert search(root, "button") == search(root, "buttons")[0]

    def test_singular_type_ending_in_s(self):
        status = MemoryNode("AXGroup", subrole="AXApplicationStatus")
        root = _root(_n("AXGroup", children=[status]))
        result = search(root, "application_status")
        assert isinstance(result, Element)
        assert result.ref is status


# ---------------------------------------------------------------------------
# Traversal order
# ---------------------------------------------------------------------------


class TestBreadthFirst:
    def test_siblings_before_grandchildren(self):
        # root -> [A, B], A -> [C]; B and C both match
        c = _n("AXButton", "C")
        a = _n("AXGroup", "A", children=[c])
        b = _n("AXButton", "B")
        assert _titles(search(_root(a, b), "buttons")) == ["B", "C"]

    def test_root_is_not_a_candidate(self):
        window = MemoryNode("AXWindow", attributes={"AXTitle": "W"}, children=[])
        root = Element(window, MemoryBackend())
        assert search(root, "window") is None

    def test_root_without_children(self):
        leaf = _n("AXButton", "Leaf")
        root = _root(leaf)
        button = root.children()[0]
        assert search(button, "button") is None
        assert search(button, "buttons") == []

    def test_singular_short_circuits(self):
        poisoned = _n("AXButton", "Poison")

        class _Poisoned(MemoryBackend):
            def list_attribute_names(self, ref):
                if ref is poisoned:
                    raise BackendError("list attributes", -25202)
                return super().list_attribute_names(ref)

        root = _root(_n("AXButton", "First"), poisoned, backend=_Poisoned())
        assert search(root, "button").get_attribute("title") == "First"
        with pytest.raises(BackendError):
            search(root, "buttons")

    def test_matches_role_or_subrole(self):
        root = _tree()
        assert _titles(search(root, "windows")) == ["Main", "Other"]
        assert _titles(search(root, "standard_windows")) == ["Main"]
        assert search(root, "dialog").get_attribute("title") == "Other"

    def test_tree_changes_seen_by_next_search(self):
        root = _tree()
        assert search(root, "slider") is None
        root.ref.append(_n("AXSlider", "Volume"))
        assert search(root, "slider").get_attribute("title") == "Volume"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_single_filter(self):
        result = search(_tree(), "button", {"title": "Deep"})
        assert result.get_attribute("title") == "Deep"

    def test_multiple_filters(self):
        root = _tree()
        assert search(root, "button", {"title": "Top", "enabled": True}) is not None
        assert search(root, "button", {"title": "Top", "enabled": False}) is None

    def test_empty_filters_match_every_node_of_type(self):
        root = _tree()
        assert search(root, "buttons", {}) == search(root, "buttons")
        assert len(search(root, "buttons", None)) == 3

    def test_unknown_filter_key_skips_candidate(self):
        # only "Top" and "Cancel" have AXEnabled; "Deep" is skipped, not an error
        assert _titles(search(_tree(), "buttons", {"enabled?": True})) == ["Top"]
        assert _titles(search(_tree(), "buttons", {"enabled": False})) == ["Cancel"]

    def test_filter_key_matching_nothing(self):
        assert search(_tree(), "buttons", {"flux": 1}) == []

    def test_matches_filters(self):
        button = search(_tree(), "button")
        assert matches_filters(button, {"title": "Top"})
        assert not matches_filters(button, {"title": "Deep"})
        assert not matches_filters(button, {"flux": "Top"})
        assert matches_filters(button, {})


# ---------------------------------------------------------------------------
# Element.search
# ---------------------------------------------------------------------------


class TestElementSearch:
    def test_keyword_filters(self):
        result = _tree().search("button", title="Cancel")
        assert result.get_attribute("title") == "Cancel"

    def test_keyword_filters_merge_with_mapping(self):
        root = _tree()
        assert root.search("button", {"title": "Top"}, enabled=True) is not None
        assert root.search("button", {"title": "Top"}, enabled=False) is None

    def test_search_below_subtree(self):
        other = _tree().search("window", title="Other")
        assert _titles(other.search("buttons")) == ["Cancel"]

    def test_filter_named_like_a_parameter(self):
        root = _tree()
        assert root.search("buttons", element_type="x") == []
        assert root.search("buttons", filters={"title": "Top"}) == []

    def test_dynamic_search_with_parameter_named_filter(self):
        assert _tree().buttons(filters="x") == []
