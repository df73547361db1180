"""Handler capability and the wrappers used by special events.

A handler is any callable ``handler(event, data)``. Returning ``False`` asks
the dispatcher to stop propagation and prevent the default action; any other
result, ``None`` included, lets the event continue.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from domevents.host import NativeEvent

Handler = Callable[[NativeEvent, Any], Any]
Contains = Callable[[Any, Any], bool]


def is_stop(result: object) -> bool:
    """True if a handler result requests stop-propagation."""
    return result is False


class HandlerWrapper:
    """Handler that stands in for a user handler.

    Unbinding by handler compares against ``original_handler`` so callers can
    pass the function they registered, not the wrapper.
    """

    def __init__(self, original: Handler | None) -> None:
        self.original_handler = original

    def __call__(self, event: NativeEvent, data: Any) -> Any:
        if self.original_handler is None:
            return None
        return self.original_handler(event, data)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} wrapping {self.original_handler!r}>"


class SpecialMouseHandler(HandlerWrapper):
    """Simulates mouseenter/mouseleave on top of mouseover/mouseout.

    The wrapped handler only runs when the pointer comes from (or goes to) a
    node outside the element the handler is bound to.
    """

    def __init__(self, original: Handler | None, contains: Contains) -> None:
        super().__init__(original)
        self._contains = contains

    def __call__(self, event: NativeEvent, data: Any) -> Any:
        target = event.current_target
        related = event.related_target

        if related is None or (related is not target and not self._contains(target, related)):
            return super().__call__(event, data)

        # Moving between descendants: neither an enter nor a leave
        return False


def original_handler(handler: Handler) -> Handler | None:
    """Unwrap handler wrappers down to the user handler."""
    while isinstance(handler, HandlerWrapper):
        handler = handler.original_handler
    return handler
