"""Element handles over native accessibility references.

An Element wraps one native ref and resolves short names against the ref's
own attribute, action, and parameterized-attribute names::

    window.get_attribute("title")            # AXTitle
    window.get_attribute("title_ui_element") # AXTitleUIElement
    window.perform_action("raise")           # AXRaise
    window.set_attribute("main", True)       # AXMain

Attribute access falls through to the same resolution, then to search::

    window.title                         # attribute value
    window.text_field(title="Name")      # first matching AXTextField, or None
    window.text_fields()                 # every AXTextField below window

Attributes win: on a window, "button" resolves to AXCloseButton (and the
like) before search is considered; use search() to force a search.

Name sets are read from the backend at most once per Element.  Refs are
not owned: an action or a write may invalidate the underlying node (e.g.
pressing a window's close button), after which the Element is stale.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from axnav._base import CHILDREN_ATTRIBUTE, ROLE_ATTRIBUTE, SUBROLE_ATTRIBUTE
from axnav.errors import (
    AccessibilityError,
    NotWritable,
    UnknownAction,
    UnknownAttribute,
    UnknownParamAttribute,
)
from axnav.resolver import resolve

if TYPE_CHECKING:
    from axnav._base import AccessibilityBackend

logger = logging.getLogger(__name__)

DispatchKind = Literal["attribute", "search", "unresolved"]

_AX_PREFIX = "AX"
_SNAKE_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def short_name(exact: str) -> str:
    """Return the snake_case short form of an exact name.

    >>> short_name("AXTitleUIElement")
    'title_ui_element'
    """
    if exact.startswith(_AX_PREFIX):
        exact = exact[len(_AX_PREFIX) :]
    return _SNAKE_RE.sub("_", exact).lower()


# ---------------------------------------------------------------------------
# Dispatch result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of Element.dispatch().

    kind is "attribute" (value is the attribute value), "search" (value is
    an Element, None, or a list of Elements) or "unresolved" (value is None).
    """

    kind: DispatchKind
    value: Any = None

    @property
    def resolved(self) -> bool:
        return self.kind != "unresolved"


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------


class Element:
    """Handle on one node of the accessibility hierarchy."""

    def __init__(self, ref: Any, backend: AccessibilityBackend) -> None:
        self._ref = ref
        self._backend = backend
        # populate-once caches
        self._attributes: tuple[str, ...] | None = None
        self._actions: tuple[str, ...] | None = None
        self._param_attributes: tuple[str, ...] | None = None
        self._pid: int | None = None

    # ---- identity --------------------------------------------------------

    @property
    def ref(self) -> Any:
        return self._ref

    @property
    def backend(self) -> AccessibilityBackend:
        return self._backend

    def wrap(self, value: Any) -> Any:
        """Wrap native refs in *value* (a ref or a list of values) as Elements."""
        if self._backend.is_element_ref(value):
            return Element(value, self._backend)
        if isinstance(value, (list, tuple)):
            return [self.wrap(v) for v in value]
        return value

    # ---- cached name sets ------------------------------------------------

    @property
    def attributes(self) -> tuple[str, ...]:
        if self._attributes is None:
            self._attributes = tuple(self._backend.list_attribute_names(self._ref))
        return self._attributes

    @property
    def actions(self) -> tuple[str, ...]:
        if self._actions is None:
            self._actions = tuple(self._backend.list_action_names(self._ref))
        return self._actions

    @property
    def param_attributes(self) -> tuple[str, ...]:
        if self._param_attributes is None:
            self._param_attributes = tuple(
                self._backend.list_param_attribute_names(self._ref)
            )
        return self._param_attributes

    @property
    def pid(self) -> int:
        if self._pid is None:
            self._pid = self._backend.pid_of(self._ref)
        return self._pid

    # ---- type ------------------------------------------------------------

    @property
    def role(self) -> str | None:
        if ROLE_ATTRIBUTE not in self.attributes:
            return None
        return self._backend.read_attribute(self._ref, ROLE_ATTRIBUTE)

    @property
    def subrole(self) -> str | None:
        if SUBROLE_ATTRIBUTE not in self.attributes:
            return None
        return self._backend.read_attribute(self._ref, SUBROLE_ATTRIBUTE)

    @property
    def type_name(self) -> str | None:
        """The most specific known type of this element (subrole, else role)."""
        subrole = self.subrole
        if subrole and subrole in self._backend.known_types():
            return subrole
        return self.role

    def is_a(self, type_name: str) -> bool:
        """True if *type_name* (exact) is this element's role or subrole."""
        return type_name in (self.role, self.subrole)

    # ---- attributes ------------------------------------------------------

    def attribute(self, exact: str) -> Any:
        """Read an attribute by its exact name, skipping resolution."""
        return self.wrap(self._backend.read_attribute(self._ref, exact))

    def attribute_for(self, name: object) -> str | None:
        return resolve(name, self.attributes)

    def action_for(self, name: object) -> str | None:
        return resolve(name, self.actions)

    def param_attribute_for(self, name: object) -> str | None:
        return resolve(name, self.param_attributes)

    def has_attribute(self, name: object) -> bool:
        return self.attribute_for(name) is not None

    def get_attribute(self, name: object) -> Any:
        exact = self.attribute_for(name)
        if exact is None:
            raise UnknownAttribute(self, name)
        return self.attribute(exact)

    def set_attribute(self, name: object, value: Any) -> Any:
        """Write an attribute and return *value*.

        The value is echoed rather than re-read: after a write the element
        may no longer exist, and the new state is not guaranteed to be
        observable yet.
        """
        exact = self.attribute_for(name)
        if exact is None:
            raise UnknownAttribute(self, name)
        if not self._backend.is_attribute_writable(self._ref, exact):
            raise NotWritable(self, exact)
        native = value.ref if isinstance(value, Element) else value
        self._backend.write_attribute(self._ref, exact, native)
        return value

    def get_param_attribute(self, name: object, param: Any) -> Any:
        exact = self.param_attribute_for(name)
        if exact is None:
            raise UnknownParamAttribute(self, name)
        native = param.ref if isinstance(param, Element) else param
        return self.wrap(self._backend.read_param_attribute(self._ref, exact, native))

    # ---- actions ---------------------------------------------------------

    def perform_action(self, name: object) -> bool:
        """Perform an action; the element may be invalid afterwards."""
        exact = self.action_for(name)
        if exact is None:
            raise UnknownAction(self, name)
        return bool(self._backend.invoke_action(self._ref, exact))

    # ---- hierarchy -------------------------------------------------------

    @property
    def has_children(self) -> bool:
        return CHILDREN_ATTRIBUTE in self.attributes

    def children(self) -> list[Element]:
        if not self.has_children:
            return []
        return [Element(ref, self._backend) for ref in self._backend.children_of(self._ref)]

    def search(
        self,
        element_type: str,
        filters: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> Element | list[Element] | None:
        """Breadth-first search below this element (see axnav.search.search)."""
        from axnav.search import search

        merged = dict(filters or {})
        merged.update(kwargs)
        return search(self, element_type, merged)

    # ---- dynamic dispatch ------------------------------------------------

    def dispatch(
        self,
        name: str,
        filters: Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        """Resolve *name* as an attribute, else as a search, else unresolved."""
        exact = self.attribute_for(name)
        if exact is not None:
            return DispatchResult("attribute", self.attribute(exact))
        if self.has_children:
            return DispatchResult("search", self.search(name, filters))
        logger.debug("%r: %r is neither an attribute nor searchable", self, name)
        return DispatchResult("unresolved")

    def __getattr__(self, name: str) -> Any:
        # only reached for names not found the normal way
        if name.startswith("_"):
            raise AttributeError(name)
        exact = self.attribute_for(name)
        if exact is not None:
            return self.attribute(exact)
        if self.has_children:
            return functools.partial(self.search, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self) -> list[str]:
        names = set(super().__dir__())
        try:
            names.update(short_name(a) for a in self.attributes)
        except AccessibilityError:
            pass
        return sorted(names)

    # ---- notifications ---------------------------------------------------

    def wait_for_notification(
        self,
        notification: str,
        timeout: float | None = None,
        on_fire: Callable[[Element, str], Any] | None = None,
    ) -> bool:
        """Block until *notification* fires on this element or *timeout* elapses."""
        from axnav.notifications import wait_for_notification

        return wait_for_notification(self, notification, timeout, on_fire)

    # ---- dunder ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._backend.same_element(self._ref, other._ref)

    def __hash__(self) -> int:
        return hash(self._ref)

    def __repr__(self) -> str:
        try:
            kind = (self.type_name or "Element").removeprefix(_AX_PREFIX)
            names = [a.removeprefix(_AX_PREFIX) for a in self.attributes]
        except AccessibilityError:
            return "<Element (invalid)>"
        return f"<{kind} @attributes={names}>"
