"""Per-element listener: binding registry plus the native event dispatcher."""

from __future__ import annotations

import weakref
from typing import Any

from loguru import logger

from domevents.config import cfg
from domevents.core.constants import FOCUSEVENTS, NAMED_EVENT_BITS, NAMED_EVENTS
from domevents.events import resolve_event_spec, type_bits_for
from domevents.handlers import Handler
from domevents.host import Host, NativeEvent, NativeListener
from domevents.listener.binding import Binding
from domevents.listener.live import LiveBinding
from domevents.listener.registry import get_default_host, listeners


def _iter_bits(bits: int):
    """Yield each single bit set in bits, lowest first."""
    while bits > 0:
        low = bits & -bits
        yield low
        bits ^= low


class EventsListener:
    """Event queue for one element, installed as the element's native listener.

    Direct bindings and per-bit live indexes share one ordered sequence and
    fire in registration order. Whatever native listener the element had before
    is kept and called first on every event.

    Get instances through :meth:`get_instance`; there is at most one per
    element until :meth:`clean` runs.
    """

    def __init__(self, element: Any, host: Host | None = None) -> None:
        self._element_ref = weakref.ref(element)
        self.host = host or get_default_host()
        self.event_bits = 0
        self.bindings: list[Binding] = []
        self.live_bindings: dict[int, LiveBinding] = {}
        self._original_listener = self.host.get_event_listener(element)
        self._last_type = 0
        self._last_event_ms = 0.0
        listeners.put(element, self)

    @classmethod
    def get_instance(cls, element: Any, host: Host | None = None) -> EventsListener:
        existing = listeners.get(element)
        return existing if existing is not None else cls(element, host)

    @property
    def element(self) -> Any:
        """The element this listener serves, or None once it was collected."""
        return self._element_ref()

    @property
    def original_event_listener(self) -> NativeListener | None:
        """Native listener the element had before this instance attached."""
        return self._original_listener

    # ------------------------------------------------------------------
    # registration
    # ------------------------------------------------------------------

    def bind(
        self,
        events: int | str,
        *handlers: Handler | None,
        namespace: str | None = None,
        original_event_type: str | None = None,
        data: Any = None,
        times: int = -1,
    ) -> None:
        """Bind handlers to a bitmask or to an event spec like ``"click.ns keyup"``.

        A ``None`` handler unbinds with the same filters instead.
        """
        if isinstance(events, str):
            for resolved in resolve_event_spec(events):
                for handler in handlers:
                    wrapped = handler if handler is None else resolved.wrap(handler, self.host.contains)
                    self._bind_bits(
                        resolved.bits,
                        resolved.namespace,
                        resolved.original_type,
                        data,
                        wrapped,
                        times,
                    )
            return

        for handler in handlers:
            self._bind_bits(events, namespace, original_event_type, data, handler, times)

    def _bind_bits(
        self,
        bits: int,
        namespace: str | None,
        original_event_type: str | None,
        data: Any,
        handler: Handler | None,
        times: int,
    ) -> None:
        if handler is None:
            self.unbind(bits, None, namespace=namespace, original_event_type=original_event_type)
            return
        self.event_bits |= bits
        self.sink()
        self.bindings.append(Binding(bits, namespace, original_event_type, handler, data, times))
        logger.debug(
            "Bound {} to {:#x} (namespace={!r}, original={!r}, times={})",
            handler,
            bits,
            namespace or "",
            original_event_type,
            times,
        )

    def live(
        self,
        events: int | str,
        selector: str,
        *handlers: Handler,
        namespace: str | None = None,
        original_event_type: str | None = None,
        data: Any = None,
        times: int = -1,
    ) -> None:
        """Delegate handlers for elements under this one that match selector."""
        if isinstance(events, str):
            for resolved in resolve_event_spec(events):
                wrapped = [resolved.wrap(h, self.host.contains) for h in handlers if h is not None]
                self._live_bits(
                    resolved.bits,
                    resolved.namespace,
                    resolved.original_type,
                    selector,
                    data,
                    wrapped,
                    times,
                )
            return

        self._live_bits(events, namespace, original_event_type, selector, data, list(handlers), times)

    def _live_bits(
        self,
        bits: int,
        namespace: str | None,
        original_event_type: str | None,
        selector: str,
        data: Any,
        handlers: list[Handler | None],
        times: int,
    ) -> None:
        handlers = [h for h in handlers if h is not None]
        if not handlers:
            return
        for bit in _iter_bits(bits):
            live_binding = self.live_bindings.get(bit)
            if live_binding is None:
                live_binding = LiveBinding(bit, self.host)
                self.event_bits |= bit
                self.sink()
                self.bindings.append(live_binding)
                self.live_bindings[bit] = live_binding

            for handler in handlers:
                live_binding.add_binding_for_selector(
                    selector,
                    Binding(bit, namespace, original_event_type, handler, data, times),
                )
            logger.debug("Live {} on {!r} for {:#x}", len(handlers), selector, bit)

    def unbind(
        self,
        events: int | str = 0,
        handler: Handler | None = None,
        *,
        namespace: str | None = None,
        original_event_type: str | None = None,
    ) -> None:
        """Remove bindings matching every given filter.

        An empty namespace, a bitmask <= 0 and a ``None`` handler match
        anything; the original event type must match exactly. Bindings that
        still listen to other event types after removing the given bits stay.
        """
        if isinstance(events, str):
            for resolved in resolve_event_spec(events):
                self.unbind(
                    resolved.bits,
                    handler,
                    namespace=resolved.namespace,
                    original_event_type=resolved.original_type,
                )
            return

        kept: list[Binding] = []
        removed = 0
        for binding in self.bindings:
            match_ns = not namespace or binding.namespace == namespace
            match_ev = events <= 0 or binding.has_event_type(events)
            match_oevt = original_event_type == binding.original_event_type
            match_fc = handler is None or binding.is_handler(handler)

            if match_ns and match_ev and match_oevt and match_fc:
                if binding.unsink(events) == 0:
                    # no longer listening to any event
                    removed += 1
                    if isinstance(binding, LiveBinding):
                        self._drop_live_binding(binding)
                    continue
            kept.append(binding)
        self.bindings = kept

        if removed:
            logger.debug("Unbound {} binding(s) for {:#x} namespace={!r}", removed, events, namespace)

    def _drop_live_binding(self, live_binding: LiveBinding) -> None:
        for bit, candidate in list(self.live_bindings.items()):
            if candidate is live_binding:
                del self.live_bindings[bit]

    def die(
        self,
        events: int | str = 0,
        selector: str | None = None,
        *,
        namespace: str | None = None,
        original_event_type: str | None = None,
    ) -> None:
        """Remove live bindings registered through :meth:`live`."""
        if isinstance(events, str):
            for resolved in resolve_event_spec(events):
                self.die(
                    resolved.bits,
                    selector,
                    namespace=resolved.namespace,
                    original_event_type=resolved.original_type,
                )
            return

        bits = list(self.live_bindings) if events <= 0 else list(_iter_bits(events))
        for bit in bits:
            live_binding = self.live_bindings.get(bit)
            if live_binding is None:
                continue
            live_binding.remove_binding_for_selector(selector, namespace, original_event_type)
            if live_binding.is_empty():
                del self.live_bindings[bit]
                self.bindings = [b for b in self.bindings if b is not live_binding]
                logger.debug("Dropped empty live index for {:#x}", bit)

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------

    def on_browser_event(self, event: NativeEvent) -> None:
        """Native callback: debounce, run the original listener, then dispatch."""
        etype = type_bits_for(event.type)
        now = self.host.now()
        if (
            self._last_type == etype
            and now - self._last_event_ms < cfg.debounce_window_ms
            and self.host.tag_name(self.element).lower() in cfg.debounce_tags
        ):
            logger.debug("Dropped duplicate {} event on {}", event.type, self.element)
            return
        self._last_event_ms = now
        self._last_type = etype

        if self._original_listener is not None:
            self._original_listener.on_browser_event(event)

        self.dispatch_event(event)

    def dispatch_event(self, event: NativeEvent) -> bool:
        """Fire matching bindings in registration order.

        Returns True if any binding asked to stop the event, in which case
        propagation was stopped and the default action prevented once.
        """
        etype = type_bits_for(event.type)
        original_event_type = event.original_event_type

        stopped = False
        # Handlers may unbind while we iterate
        for binding in list(self.bindings):
            if binding.has_event_type(etype) and binding.matches_original_type(original_event_type):
                if not binding.fire(event):
                    stopped = True

        if stopped:
            event.stop_propagation()
            event.prevent_default()
        return stopped

    # ------------------------------------------------------------------
    # native hookup and teardown
    # ------------------------------------------------------------------

    def sink(self) -> None:
        """Make this the element's listener and subscribe it to event_bits."""
        element = self.element
        if element is None:
            return
        self.host.set_event_listener(element, self)

        for name, bit in NAMED_EVENTS.items():
            if self.event_bits & bit:
                self.host.sink_named_event(element, name)

        native_bits = self.event_bits & ~NAMED_EVENT_BITS
        if not native_bits:
            return
        if (
            (native_bits | FOCUSEVENTS) == FOCUSEVENTS
            and cfg.focus_tabindex
            and not self.host.get_attribute(element, "tabIndex")
        ):
            # focus/blur only reach elements that can take focus
            self.host.set_attribute(element, "tabIndex", "0")
        self.host.sink_events(element, native_bits | self.host.get_events_sunk(element))

    def clean_event_delegation(self) -> None:
        """Drop every live binding, keeping direct ones."""
        for live_binding in self.live_bindings.values():
            live_binding.clean()
        dropped = set(map(id, self.live_bindings.values()))
        self.bindings = [b for b in self.bindings if id(b) not in dropped]
        self.live_bindings = {}

    def clean(self) -> None:
        """Restore the original native listener and forget every binding."""
        element = self.element
        self.bindings = []
        self.live_bindings = {}
        self.event_bits = 0
        if element is None:
            return
        self.host.set_event_listener(element, self._original_listener)
        if listeners.get(element) is self:
            listeners.remove(element)
        logger.debug("Cleaned listener for {}", element)

    def __repr__(self) -> str:
        return f"<EventsListener {self.element!r} bits={self.event_bits:#x} bindings={len(self.bindings)}>"


def get_instance(element: Any, host: Host | None = None) -> EventsListener:
    return EventsListener.get_instance(element, host)


def has_instance(element: Any) -> bool:
    return element in listeners


def clean(element: Any) -> None:
    """Tear down the element's listener, if any. Safe to call repeatedly."""
    listener = listeners.get(element)
    if listener is not None:
        listener.clean()


def clean_delegation(element: Any) -> None:
    listener = listeners.get(element)
    if listener is not None:
        listener.clean_event_delegation()


def rebind(element: Any) -> None:
    """Re-subscribe the element's listener, e.g. after the host dropped it."""
    listener = listeners.get(element)
    if listener is not None and listener.event_bits != 0:
        listener.sink()
