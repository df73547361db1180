"""Delegated ("live") bindings: one index per event-type bit, keyed by selector."""

from __future__ import annotations

from domevents.core.constants import LIVE_NAMESPACE
from domevents.events import type_bits_for
from domevents.host import Host, NativeEvent
from domevents.listener.binding import Binding


class LiveBinding(Binding):
    """Selector-keyed bindings for one event-type bit.

    From the dispatcher's point of view the whole index is a single binding;
    firing it resolves which selectors match the event's target and runs their
    bindings selector by selector, each from the nearest matching element
    outwards.
    """

    def __init__(self, type_bits: int, host: Host) -> None:
        super().__init__(type_bits, LIVE_NAMESPACE)
        self._host = host
        self._by_selector: dict[str, list[Binding]] = {}

    def add_binding_for_selector(self, selector: str, binding: Binding) -> None:
        self._by_selector.setdefault(selector, []).append(binding)

    def remove_binding_for_selector(
        self,
        selector: str | None,
        namespace: str | None = None,
        original_event_type: str | None = None,
    ) -> None:
        """Remove bindings under selector (every selector when None).

        Without a namespace or original-type filter the selector key is dropped
        outright; otherwise only the bindings matching the given filters go.
        """
        selectors = list(self._by_selector) if selector is None else [selector]
        for sel in selectors:
            if namespace is None and original_event_type is None:
                self._by_selector.pop(sel, None)
                continue

            bindings = self._by_selector.get(sel)
            if not bindings:
                continue
            kept = [
                b
                for b in bindings
                if not (
                    (namespace is None or namespace == b.namespace)
                    and (original_event_type is None or original_event_type == b.original_event_type)
                )
            ]
            if kept:
                self._by_selector[sel] = kept
            else:
                del self._by_selector[sel]

    def selectors(self) -> list[str]:
        return list(self._by_selector)

    def is_empty(self) -> bool:
        return not self._by_selector

    def clean(self) -> None:
        self._by_selector = {}

    def matches_original_type(self, original_event_type: str | None) -> bool:
        # Inner bindings carry their own original types; filtered in fire()
        return True

    def fire(self, event: NativeEvent) -> bool:
        if self.is_empty():
            return True

        # first element where the event was fired
        target = event.target
        # element the delegation listener is attached to
        root = event.current_target
        if target is None or root is None:
            return True

        etype = type_bits_for(event.type)
        tag = event.original_event_type
        valid_selectors = [
            selector
            for selector, bindings in self._by_selector.items()
            if any(b.has_event_type(etype) for b in bindings)
        ]
        if not valid_selectors:
            return True

        matches = self._host.match_chain(root, target, valid_selectors)
        if not any(matches.get(selector) for selector in valid_selectors):
            return True

        stop_element = None
        try:
            for selector in valid_selectors:
                bindings = [
                    b
                    for b in self._by_selector.get(selector, ())
                    if b.has_event_type(etype) and b.matches_original_type(tag)
                ]
                for element in matches.get(selector, ()):
                    # Once an element stops the event, only its own bindings still run
                    if stop_element is not None and element is not stop_element:
                        continue
                    event.current_target = element
                    for binding in bindings:
                        if not binding.fire(event):
                            stop_element = element
        finally:
            event.current_target = root

        return stop_element is None

    def __repr__(self) -> str:
        return f"<LiveBinding bits={self.type_bits:#x} selectors={self.selectors()!r}>"
