"""Per-element event dispatch and delegation engine."""

from domevents.events import (
    MouseSpecialEvent,
    SpecialEvent,
    event_bits,
    parse_event_spec,
    register_special,
    resolve_event_spec,
    special_for,
    type_bits_for,
    unregister_special,
)
from domevents.listener import (
    Binding,
    EventsListener,
    LiveBinding,
    clean,
    clean_delegation,
    get_instance,
    has_instance,
    rebind,
    set_default_host,
)

__version__ = "0.1.0"

__all__ = [
    "Binding",
    "EventsListener",
    "LiveBinding",
    "MouseSpecialEvent",
    "SpecialEvent",
    "__version__",
    "clean",
    "clean_delegation",
    "event_bits",
    "get_instance",
    "has_instance",
    "parse_event_spec",
    "rebind",
    "register_special",
    "resolve_event_spec",
    "set_default_host",
    "special_for",
    "type_bits_for",
    "unregister_special",
]
