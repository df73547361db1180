"""Event-type registry: name to bitmask, event spec parsing, special events."""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

from domevents.core.constants import MOUSEENTER, MOUSELEAVE, NAMED_EVENTS, NATIVE_EVENTS
from domevents.handlers import Contains, Handler, SpecialMouseHandler

_SPEC_SEPARATOR = re.compile(r"[\s,]+")


def type_bits_for(name: str | None) -> int:
    """Bitmask for one event name; unknown or empty names give 0."""
    if not name:
        return 0
    name = name.lower()
    if name in NAMED_EVENTS:
        return NAMED_EVENTS[name]
    return NATIVE_EVENTS.get(name, 0)


def event_bits(*specs: str) -> int:
    """OR together the bits of every event name in the given specs."""
    ret = 0
    for spec in specs:
        for name in _SPEC_SEPARATOR.split(spec):
            ret |= type_bits_for(name)
    return ret


@dataclass(frozen=True)
class EventToken:
    """One ``name.namespace`` token of an event spec."""

    name: str
    namespace: str | None = None


def parse_event_spec(spec: str) -> list[EventToken]:
    """Split ``"click.ns1 mouseover.ns2"`` into tokens.

    Tokens are separated by whitespace or commas and split on their first dot.
    A token without a dot has no namespace; ``".ns"`` names no event at all and
    so filters on the namespace alone.
    """
    tokens: list[EventToken] = []
    for part in _SPEC_SEPARATOR.split(spec.strip()):
        if not part:
            continue
        name, dot, namespace = part.partition(".")
        tokens.append(EventToken(name=name, namespace=namespace if dot else None))
    return tokens


class SpecialEvent:
    """A logical event implemented by listening to a different native event."""

    def __init__(self, original_type: str, delegate_type: str) -> None:
        self.original_type = original_type
        self.delegate_type = delegate_type

    def create_delegate_handler(self, handler: Handler | None, contains: Contains) -> Handler:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.original_type} -> {self.delegate_type}>"


class MouseSpecialEvent(SpecialEvent):
    """mouseenter/mouseleave simulated from mouseover/mouseout."""

    def create_delegate_handler(self, handler: Handler | None, contains: Contains) -> Handler:
        return SpecialMouseHandler(handler, contains)


# Process-wide; written during setup, read on the dispatch path
special: dict[str, SpecialEvent] = {
    MOUSEENTER: MouseSpecialEvent(MOUSEENTER, "mouseover"),
    MOUSELEAVE: MouseSpecialEvent(MOUSELEAVE, "mouseout"),
}


def special_for(name: str) -> SpecialEvent | None:
    return special.get(name.lower()) if name else None


def register_special(event: SpecialEvent) -> None:
    """Register (or replace) a special event under its logical name."""
    special[event.original_type.lower()] = event
    logger.debug("Special event registered: {} -> {}", event.original_type, event.delegate_type)


def unregister_special(name: str) -> SpecialEvent | None:
    return special.pop(name.lower(), None)


@dataclass(frozen=True)
class ResolvedEvent:
    """An event spec token after special-event translation."""

    name: str
    namespace: str | None
    bits: int
    original_type: str | None = None
    hook: SpecialEvent | None = None

    def wrap(self, handler: Handler | None, contains: Contains) -> Handler | None:
        """Wrap handler for a special event; plain events pass it through."""
        if self.hook is None:
            return handler
        return self.hook.create_delegate_handler(handler, contains)


def resolve_event_spec(spec: str) -> list[ResolvedEvent]:
    """Parse spec and translate special event names to their delegate types."""
    resolved: list[ResolvedEvent] = []
    for token in parse_event_spec(spec):
        hook = special_for(token.name)
        name = hook.delegate_type if hook is not None else token.name
        resolved.append(
            ResolvedEvent(
                name=name,
                namespace=token.namespace,
                bits=type_bits_for(name),
                original_type=hook.original_type if hook is not None else None,
                hook=hook,
            )
        )
    return resolved


__all__ = [
    "EventToken",
    "MouseSpecialEvent",
    "ResolvedEvent",
    "SpecialEvent",
    "event_bits",
    "parse_event_spec",
    "register_special",
    "resolve_event_spec",
    "special",
    "special_for",
    "type_bits_for",
    "unregister_special",
]
