"""In-memory DOM used as the default host.

Small on purpose: elements with tag/id/classes/attributes, events that bubble
from their target to the root, and selector matching limited to compound
simple selectors (``div``, ``#id``, ``.cls``, ``li.item.active``, comma lists).
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from domevents.core.constants import NAMED_EVENTS
from domevents.core.errors import ScenarioError
from domevents.events import special_for, type_bits_for
from domevents.host import NativeListener

_SIMPLE_SELECTOR = re.compile(r"^(?P<tag>\*|[A-Za-z][\w-]*)?(?P<rest>(?:[#.][\w-]+)*)$")
_SELECTOR_PART = re.compile(r"([#.])([\w-]+)")


@dataclass(eq=False)
class Element:
    """A DOM node. Compared and hashed by identity."""

    tag: str
    id: str = ""
    classes: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    parent: Element | None = field(default=None, repr=False)
    children: list[Element] = field(default_factory=list, repr=False)
    event_listener: NativeListener | None = field(default=None, repr=False)
    events_sunk: int = field(default=0, repr=False)
    named_events: set[str] = field(default_factory=set, repr=False)

    def append(self, child: Element) -> Element:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: Element) -> None:
        self.children.remove(child)
        child.parent = None

    def ancestors_or_self(self) -> Iterator[Element]:
        node: Element | None = self
        while node is not None:
            yield node
            node = node.parent

    def contains(self, node: Element | None) -> bool:
        """True if node is a strict descendant of this element."""
        if node is None or node is self:
            return False
        return any(a is self for a in node.ancestors_or_self())

    def matches(self, selector: str) -> bool:
        return any(self._matches_simple(s.strip()) for s in selector.split(","))

    def _matches_simple(self, selector: str) -> bool:
        m = _SIMPLE_SELECTOR.match(selector)
        if not selector or m is None:
            logger.warning("Unsupported selector {!r}; treating as no match", selector)
            return False
        tag = m.group("tag")
        if tag and tag != "*" and tag.lower() != self.tag.lower():
            return False
        for kind, name in _SELECTOR_PART.findall(m.group("rest")):
            if kind == "#" and name != self.id:
                return False
            if kind == "." and name not in self.classes:
                return False
        return True

    def sinks(self, event_type: str) -> bool:
        """True if this element is subscribed to the named event."""
        if event_type in NAMED_EVENTS:
            return event_type in self.named_events
        return bool(self.events_sunk & type_bits_for(event_type))

    def find(self, element_id: str) -> Element | None:
        if self.id == element_id:
            return self
        for child in self.children:
            found = child.find(element_id)
            if found is not None:
                return found
        return None

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        cls = "".join(f".{c}" for c in self.classes)
        return f"<{self.tag}{ident}{cls}>"


@dataclass(eq=False)
class Event:
    """A native event travelling through the in-memory DOM."""

    type: str
    target: Element | None = None
    related_target: Element | None = None
    original_event_type: str | None = None
    current_target: Element | None = None
    propagation_stopped: bool = False
    default_prevented: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    def prevent_default(self) -> None:
        self.default_prevented = True


class SimpleHost:
    """Host primitives over :class:`Element` trees."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock

    def now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return time.monotonic() * 1000.0

    def get_event_listener(self, element: Element) -> NativeListener | None:
        return element.event_listener

    def set_event_listener(self, element: Element, listener: NativeListener | None) -> None:
        element.event_listener = listener

    def get_events_sunk(self, element: Element) -> int:
        return element.events_sunk

    def sink_events(self, element: Element, bits: int) -> None:
        element.events_sunk = bits

    def sink_named_event(self, element: Element, name: str) -> None:
        element.named_events.add(name)

    def tag_name(self, element: Element) -> str:
        return element.tag

    def get_attribute(self, element: Element, name: str) -> str:
        return element.attributes.get(name, "")

    def set_attribute(self, element: Element, name: str, value: str) -> None:
        element.attributes[name] = value

    def match_chain(self, root: Element, target: Element, selectors: list[str]) -> dict[str, list[Element]]:
        chain: list[Element] = []
        for node in target.ancestors_or_self():
            chain.append(node)
            if node is root:
                break
        else:
            # target is not under root
            return {}

        result: dict[str, list[Element]] = {}
        for selector in selectors:
            matched = [node for node in chain if node.matches(selector)]
            if matched:
                result[selector] = matched
        return result

    def contains(self, ancestor: Element, node: Element | None) -> bool:
        return ancestor.contains(node)


def dispatch(event: Event) -> Event:
    """Bubble event from its target to the root, calling sinking listeners."""
    node = event.target
    while node is not None:
        listener = node.event_listener
        if listener is not None and node.sinks(event.type):
            event.current_target = node
            listener.on_browser_event(event)
        if event.propagation_stopped:
            break
        node = node.parent
    event.current_target = None
    return event


def fire(target: Element, event_type: str, related: Element | None = None) -> Event:
    return dispatch(Event(type=event_type, target=target, related_target=related))


def trigger(target: Element, name: str, related: Element | None = None) -> Event:
    """Fire a logical event; special events go out as their delegate type, tagged."""
    hook = special_for(name)
    if hook is None:
        return fire(target, name, related)
    return dispatch(
        Event(
            type=hook.delegate_type,
            target=target,
            related_target=related,
            original_event_type=hook.original_type,
        )
    )


def build_tree(spec: dict[str, Any], parent: Element | None = None) -> Element:
    """Build an element tree from ``{tag, id, class, attributes, children}`` dicts."""
    if not isinstance(spec, dict) or not spec.get("tag"):
        raise ScenarioError("tree node must be a mapping with a tag", code="invalid_node", details={"node": spec})
    classes = spec.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    attributes = spec.get("attributes") or {}
    element = Element(
        tag=str(spec["tag"]),
        id=str(spec.get("id", "")),
        classes=[str(c) for c in classes],
        attributes={str(k): str(v) for k, v in attributes.items()},
    )
    if parent is not None:
        parent.append(element)
    for child in spec.get("children") or []:
        build_tree(child, element)
    return element
