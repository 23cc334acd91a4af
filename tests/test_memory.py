"""Tests for the in-memory backend."""

from __future__ import annotations

import pytest

from axnav._base import CHILDREN_ATTRIBUTE
from axnav.errors import BackendError
from axnav.platforms.memory import MemoryBackend, MemoryNode

# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class TestMemoryNode:
    def test_leaf_has_no_children_attribute(self):
        assert CHILDREN_ATTRIBUTE not in MemoryNode("AXButton").attributes

    def test_empty_children_keeps_attribute(self):
        assert MemoryNode("AXGroup", children=[]).attributes[CHILDREN_ATTRIBUTE] == []

    def test_append_links_parent(self):
        parent = MemoryNode("AXGroup")
        child = parent.append(MemoryNode("AXButton"))
        assert child.parent is parent
        assert parent.children == [child]
        assert CHILDREN_ATTRIBUTE in parent.attributes

    def test_remove(self):
        child = MemoryNode("AXButton")
        parent = MemoryNode("AXGroup", children=[child])
        child.remove()
        assert parent.children == []
        assert child.parent is None

    def test_walk_and_ancestors(self):
        leaf = MemoryNode("AXButton")
        mid = MemoryNode("AXGroup", children=[leaf])
        root = MemoryNode("AXWindow", children=[mid])
        assert list(root.walk()) == [root, mid, leaf]
        assert list(leaf.ancestors()) == [mid, root]

    def test_from_dict(self):
        root = MemoryNode.from_dict(
            {
                "role": "AXWindow",
                "subrole": "AXStandardWindow",
                "attributes": {"AXTitle": "Main"},
                "writable": ["AXMain"],
                "actions": ["AXRaise"],
                "children": [{"role": "AXButton", "attributes": {"AXTitle": "OK"}}],
            }
        )
        assert root.attributes["AXSubrole"] == "AXStandardWindow"
        assert root.writable == {"AXMain"}
        assert root.actions["AXRaise"](root) is True
        assert root.children[0].attributes["AXTitle"] == "OK"
        assert root.children[0].children is None


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


class TestMemoryBackend:
    def test_pids_assigned_to_whole_tree(self):
        leaf = MemoryNode("AXButton")
        backend = MemoryBackend(apps={5: MemoryNode("AXApplication", children=[leaf])})
        assert backend.pid_of(leaf) == 5

    def test_read_missing_attribute(self):
        with pytest.raises(BackendError) as info:
            MemoryBackend().read_attribute(MemoryNode("AXButton"), "AXTitle")
        assert info.value.code == -25205

    def test_children_read_is_a_copy(self):
        node = MemoryNode("AXGroup", children=[MemoryNode("AXButton")])
        children = MemoryBackend().read_attribute(node, CHILDREN_ATTRIBUTE)
        children.clear()
        assert len(node.children) == 1

    def test_write_missing_attribute(self):
        with pytest.raises(BackendError):
            MemoryBackend().write_attribute(MemoryNode("AXButton"), "AXTitle", "x")

    def test_invoke_action_result(self):
        node = MemoryNode(
            "AXButton",
            actions={"AXPress": lambda n: None, "AXCancel": lambda n: 0},
        )
        backend = MemoryBackend()
        assert backend.invoke_action(node, "AXPress") is True
        assert backend.invoke_action(node, "AXCancel") is False
        with pytest.raises(BackendError):
            backend.invoke_action(node, "AXRaise")

    def test_post_notification_reaches_ancestor_observers(self):
        leaf = MemoryNode("AXButton")
        app = MemoryNode("AXApplication", children=[leaf])
        backend = MemoryBackend(apps={1: app})
        seen = []
        handle = backend.register_notification(app, "AXValueChanged", lambda s, n: seen.append(s))
        backend.register_notification(leaf, "AXTitleChanged", lambda s, n: seen.append(n))
        assert backend.post_notification(leaf, "AXValueChanged") == 1
        assert seen == [leaf]
        backend.deregister(handle)
        assert backend.post_notification(leaf, "AXValueChanged") == 0
        assert backend.registration_count == 1

    def test_deregister_twice_is_harmless(self):
        backend = MemoryBackend()
        handle = backend.register_notification(MemoryNode("AXButton"), "AXMoved", lambda s, n: None)
        backend.deregister(handle)
        backend.deregister(handle)
        assert backend.registration_count == 0


class TestNestedTrees:
    def test_constructor_with_nested_children(self):
        leaf = MemoryNode("AXButton")
        group = MemoryNode("AXGroup", children=[leaf])
        root = MemoryNode("AXWindow", children=[group])
        assert root.children == [group]
        assert group.parent is root
        assert leaf.parent is group
        assert (root.pid, group.pid, leaf.pid) == (0, 0, 0)

    def test_from_dict_nested(self):
        root = MemoryNode.from_dict(
            {
                "role": "AXApplication",
                "children": [
                    {
                        "role": "AXWindow",
                        "children": [
                            {"role": "AXGroup", "children": [{"role": "AXButton"}]},
                        ],
                    }
                ],
            }
        )
        button = root.children[0].children[0].children[0]
        assert button.attributes["AXRole"] == "AXButton"
        assert [n.attributes["AXRole"] for n in button.ancestors()] == [
            "AXGroup",
            "AXWindow",
            "AXApplication",
        ]
