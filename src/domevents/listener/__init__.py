"""Listener: bindings, live delegation indexes, per-element dispatcher."""

from domevents.listener.binding import Binding
from domevents.listener.instance import (
    EventsListener,
    clean,
    clean_delegation,
    get_instance,
    has_instance,
    rebind,
)
from domevents.listener.live import LiveBinding
from domevents.listener.registry import ListenerRegistry, get_default_host, listeners, set_default_host

__all__ = [
    "Binding",
    "EventsListener",
    "ListenerRegistry",
    "LiveBinding",
    "clean",
    "clean_delegation",
    "get_default_host",
    "get_instance",
    "has_instance",
    "listeners",
    "rebind",
    "set_default_host",
]
