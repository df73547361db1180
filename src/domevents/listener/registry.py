"""Side table associating elements with their listener instance."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domevents.host import Host
    from domevents.listener.instance import EventsListener


class ListenerRegistry:
    """Element -> EventsListener, holding elements weakly.

    The association is created on first registration and removed by an
    explicit clean; collecting the element also drops its entry.
    """

    def __init__(self) -> None:
        self._by_element: weakref.WeakKeyDictionary[Any, EventsListener] = weakref.WeakKeyDictionary()

    def get(self, element: Any) -> EventsListener | None:
        return self._by_element.get(element)

    def put(self, element: Any, listener: EventsListener) -> None:
        self._by_element[element] = listener

    def remove(self, element: Any) -> EventsListener | None:
        return self._by_element.pop(element, None)

    def __contains__(self, element: Any) -> bool:
        return element in self._by_element

    def __len__(self) -> int:
        return len(self._by_element)

    def clear(self) -> None:
        self._by_element.clear()


listeners = ListenerRegistry()

_default_host: Host | None = None


def get_default_host() -> Host:
    """Host used when none is passed explicitly; the in-memory DOM unless overridden."""
    global _default_host
    if _default_host is None:
        from domevents.dom import SimpleHost

        _default_host = SimpleHost()
    return _default_host


def set_default_host(host: Host | None) -> None:
    global _default_host
    _default_host = host
