"""In-memory accessibility backend.

Holds a static tree of MemoryNode objects that behaves like a live
hierarchy: attributes can be read and written, actions run Python
callables, and notifications can be posted from any thread.  Used for
tests and for replaying trees saved as JSON::

    window = MemoryNode("AXWindow", attributes={"AXTitle": "Main"}, children=[
        MemoryNode("AXButton", attributes={"AXTitle": "OK"}),
    ])
    app = MemoryNode("AXApplication", children=[window])
    backend = MemoryBackend(apps={42: app})
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from axnav._base import (
    CHILDREN_ATTRIBUTE,
    ROLE_ATTRIBUTE,
    SUBROLE_ATTRIBUTE,
    AccessibilityBackend,
    NotificationCallback,
)
from axnav.errors import BackendError, RegistrationFailure
from axnav.roles import KNOWN_TYPES

logger = logging.getLogger(__name__)

# AXError codes reported for missing attributes / actions
_ERR_ATTRIBUTE_UNSUPPORTED = -25205
_ERR_ACTION_UNSUPPORTED = -25206
_ERR_PARAM_ATTRIBUTE_UNSUPPORTED = -25213
_ERR_CANNOT_COMPLETE = -25204


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class MemoryNode:
    """One node of an in-memory tree.

    Args:
        role: AXRole value.
        subrole: Optional AXSubrole value.
        attributes: Extra attributes, in the order they should be listed.
        children: Child nodes.  None makes the node a leaf with no
            AXChildren attribute at all; an empty list keeps the attribute.
        actions: Action name -> callable(node) returning a success flag
            (None counts as success).
        param_attributes: Name -> callable(node, param) returning a value.
        writable: Attribute names that accept writes.
    """

    def __init__(
        self,
        role: str,
        *,
        subrole: str | None = None,
        attributes: Mapping[str, Any] | None = None,
        children: Iterable[MemoryNode] | None = None,
        actions: Mapping[str, Callable[[MemoryNode], Any]] | None = None,
        param_attributes: Mapping[str, Callable[[MemoryNode, Any], Any]] | None = None,
        writable: Iterable[str] = (),
    ) -> None:
        # set before children are appended; append() reads both
        self.parent: MemoryNode | None = None
        self.pid = 0
        self.attributes: dict[str, Any] = {ROLE_ATTRIBUTE: role}
        if subrole is not None:
            self.attributes[SUBROLE_ATTRIBUTE] = subrole
        self.attributes.update(attributes or {})
        self.children: list[MemoryNode] | None = None
        if children is not None:
            self.children = []
            self.attributes[CHILDREN_ATTRIBUTE] = self.children
            for child in children:
                self.append(child)
        self.actions: dict[str, Callable[[MemoryNode], Any]] = dict(actions or {})
        self.param_attributes = dict(param_attributes or {})
        self.writable = set(writable)

    def append(self, child: MemoryNode) -> MemoryNode:
        if self.children is None:
            self.children = []
            self.attributes[CHILDREN_ATTRIBUTE] = self.children
        child.parent = self
        child.pid = self.pid
        self.children.append(child)
        return child

    def remove(self) -> None:
        """Detach this node from its parent."""
        if self.parent is not None and self.parent.children is not None:
            self.parent.children.remove(self)
        self.parent = None

    def walk(self) -> Iterable[MemoryNode]:
        yield self
        for child in self.children or ():
            yield from child.walk()

    def ancestors(self) -> Iterable[MemoryNode]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MemoryNode:
        """Build a tree from a JSON-style dict.

        Shape::

            {"role": "AXWindow", "subrole": "AXStandardWindow",
             "attributes": {"AXTitle": "Main"}, "writable": ["AXMain"],
             "actions": ["AXRaise"], "children": [...]}

        Listed actions always succeed.
        """
        children = data.get("children")
        return cls(
            data["role"],
            subrole=data.get("subrole"),
            attributes=data.get("attributes"),
            children=None if children is None else [cls.from_dict(c) for c in children],
            actions={name: _noop_action for name in data.get("actions", ())},
            writable=data.get("writable", ()),
        )

    def __repr__(self) -> str:
        title = self.attributes.get("AXTitle")
        label = f" {title!r}" if title else ""
        return f"<MemoryNode {self.attributes[ROLE_ATTRIBUTE]}{label}>"


def _noop_action(node: MemoryNode) -> bool:
    return True


# ---------------------------------------------------------------------------
# Notification registrations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Registration:
    token: int
    node: MemoryNode
    name: str
    callback: NotificationCallback


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


class MemoryBackend(AccessibilityBackend):
    """Backend serving a static tree of MemoryNode objects.

    Args:
        apps: Process id -> application root node.
        notifications: If given, the only notification names that may be
            registered; anything else raises RegistrationFailure.
        extra_types: Additional known type identifiers, appended after the
            standard AX roles and subroles.
    """

    def __init__(
        self,
        apps: Mapping[int, MemoryNode] | None = None,
        *,
        notifications: Iterable[str] | None = None,
        extra_types: Sequence[str] = (),
    ) -> None:
        self._system = MemoryNode("AXSystemWide", children=[])
        self._apps: dict[int, MemoryNode] = {}
        self._bundle_ids: dict[str, int] = {}
        self._notifications = None if notifications is None else frozenset(notifications)
        self._types = tuple(dict.fromkeys((*KNOWN_TYPES, *extra_types)))
        self._registrations: dict[int, _Registration] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        for pid, node in (apps or {}).items():
            self.add_application(pid, node)

    @property
    def platform_name(self) -> str:
        return "memory"

    def initialize(self) -> None:
        pass

    # ---- tree management -------------------------------------------------

    def add_application(
        self, pid: int, node: MemoryNode, bundle_id: str | None = None
    ) -> MemoryNode:
        self._system.append(node)
        if bundle_id is not None:
            self._bundle_ids[bundle_id] = pid
        for n in node.walk():
            n.pid = pid
        self._apps[pid] = node
        return node

    # ---- roots -----------------------------------------------------------

    def application_ref(self, pid: int) -> MemoryNode:
        try:
            return self._apps[pid]
        except KeyError:
            raise BackendError(f"application_ref({pid})", _ERR_CANNOT_COMPLETE) from None

    def system_wide_ref(self) -> MemoryNode:
        return self._system

    def pid_for_bundle_id(self, bundle_id: str) -> int | None:
        return self._bundle_ids.get(bundle_id)

    # ---- name sets -------------------------------------------------------

    def list_attribute_names(self, ref: MemoryNode) -> list[str]:
        return list(ref.attributes)

    def list_action_names(self, ref: MemoryNode) -> list[str]:
        return list(ref.actions)

    def list_param_attribute_names(self, ref: MemoryNode) -> list[str]:
        return list(ref.param_attributes)

    # ---- reads, writes, actions -----------------------------------------

    def read_attribute(self, ref: MemoryNode, name: str) -> Any:
        try:
            value = ref.attributes[name]
        except KeyError:
            raise BackendError(f"read {name}", _ERR_ATTRIBUTE_UNSUPPORTED) from None
        return list(value) if name == CHILDREN_ATTRIBUTE else value

    def is_attribute_writable(self, ref: MemoryNode, name: str) -> bool:
        return name in ref.writable

    def write_attribute(self, ref: MemoryNode, name: str, value: Any) -> None:
        if name not in ref.attributes:
            raise BackendError(f"write {name}", _ERR_ATTRIBUTE_UNSUPPORTED)
        ref.attributes[name] = value

    def invoke_action(self, ref: MemoryNode, name: str) -> bool:
        try:
            action = ref.actions[name]
        except KeyError:
            raise BackendError(f"perform {name}", _ERR_ACTION_UNSUPPORTED) from None
        result = action(ref)
        return True if result is None else bool(result)

    def read_param_attribute(self, ref: MemoryNode, name: str, param: Any) -> Any:
        try:
            getter = ref.param_attributes[name]
        except KeyError:
            raise BackendError(f"read {name}", _ERR_PARAM_ATTRIBUTE_UNSUPPORTED) from None
        return getter(ref, param)

    def pid_of(self, ref: MemoryNode) -> int:
        return ref.pid

    def is_element_ref(self, value: Any) -> bool:
        return isinstance(value, MemoryNode)

    def same_element(self, a: Any, b: Any) -> bool:
        return a is b

    def known_types(self) -> Sequence[str]:
        return self._types

    # ---- notifications ---------------------------------------------------

    def register_notification(
        self,
        ref: MemoryNode,
        name: str,
        callback: NotificationCallback,
    ) -> int:
        if self._notifications is not None and name not in self._notifications:
            raise RegistrationFailure(name, "unsupported notification")
        reg = _Registration(next(self._tokens), ref, name, callback)
        with self._lock:
            self._registrations[reg.token] = reg
        return reg.token

    def deregister(self, handle: int) -> None:
        with self._lock:
            self._registrations.pop(handle, None)

    @property
    def registration_count(self) -> int:
        with self._lock:
            return len(self._registrations)

    def run_until(self, fired: threading.Event, timeout: float) -> bool:
        return fired.wait(timeout)

    def post_notification(self, node: MemoryNode, name: str) -> int:
        """Deliver *name* from *node* to observers of it or its ancestors.

        Returns the number of callbacks invoked.
        """
        targets = {id(node), *(id(a) for a in node.ancestors())}
        with self._lock:
            matching = [
                r for r in self._registrations.values()
                if r.name == name and id(r.node) in targets
            ]
        for reg in matching:
            reg.callback(node, name)
        logger.debug("Posted %s from %r to %d observer(s)", name, node, len(matching))
        return len(matching)

    def post_notification_later(
        self, node: MemoryNode, name: str, delay: float
    ) -> threading.Timer:
        """Post *name* from a timer thread after *delay* seconds."""
        timer = threading.Timer(delay, self.post_notification, args=(node, name))
        timer.daemon = True
        timer.start()
        return timer
