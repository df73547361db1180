"""Interfaces to the host platform: native events, native listeners, selector matching."""

from __future__ import annotations

from typing import Any, Protocol


class NativeEvent(Protocol):
    """Native event as delivered to an element's listener."""

    type: str
    target: Any
    current_target: Any
    related_target: Any
    # Logical type when a special event was fired through its delegate type
    original_event_type: str | None

    def stop_propagation(self) -> None: ...

    def prevent_default(self) -> None: ...


class NativeListener(Protocol):
    """The single native listener an element can carry."""

    def on_browser_event(self, event: NativeEvent) -> None: ...


class Host(Protocol):
    """Platform primitives the dispatch engine consumes."""

    def get_event_listener(self, element: Any) -> NativeListener | None:
        """Return the native listener installed on element, if any."""
        ...

    def set_event_listener(self, element: Any, listener: NativeListener | None) -> None:
        """Install listener as the element's only native listener."""
        ...

    def get_events_sunk(self, element: Any) -> int:
        """Native event bits the element is currently subscribed to."""
        ...

    def sink_events(self, element: Any, bits: int) -> None:
        """Subscribe element to exactly the given native event bits."""
        ...

    def sink_named_event(self, element: Any, name: str) -> None:
        """Subscribe element to an event the native bitmask cannot express."""
        ...

    def tag_name(self, element: Any) -> str: ...

    def get_attribute(self, element: Any, name: str) -> str: ...

    def set_attribute(self, element: Any, name: str, value: str) -> None: ...

    def match_chain(self, root: Any, target: Any, selectors: list[str]) -> dict[str, list[Any]]:
        """Map each selector to the elements from target up to root that match it.

        Elements are ordered nearest-to-target first. Selectors without a match
        are left out of the result.
        """
        ...

    def contains(self, ancestor: Any, node: Any) -> bool:
        """True if node is a strict descendant of ancestor."""
        ...

    def now(self) -> float:
        """Monotonic clock in milliseconds."""
        ...
