"""One registered handler plus its filters."""

from __future__ import annotations

from typing import Any

from loguru import logger

from domevents.config import cfg
from domevents.core.errors import BindingError
from domevents.handlers import Handler, is_stop, original_handler
from domevents.host import NativeEvent


class Binding:
    """A handler bound to a set of event types.

    ``times`` is the remaining fire budget (-1 means unlimited). A binding that
    has used up its budget stays in place and reports "continue" until it is
    explicitly unbound.
    """

    def __init__(
        self,
        type_bits: int,
        namespace: str | None = None,
        original_event_type: str | None = None,
        handler: Handler | None = None,
        data: Any = None,
        times: int = -1,
    ) -> None:
        self.type_bits = type_bits
        self.namespace = namespace or ""
        self.original_event_type = original_event_type
        self.handler = handler
        self.data = data
        self.times = times

    def fire(self, event: NativeEvent) -> bool:
        """Run the handler; False means stop propagation."""
        if self.times == 0:
            return True
        self.times -= 1
        try:
            result = self.handler(event, self.data)
        except Exception as exc:
            if cfg.raise_handler_errors:
                raise
            logger.exception("Handler {} failed on {} event: {}", self.handler, event.type, exc)
            return True
        return not is_stop(result)

    def has_event_type(self, bits: int) -> bool:
        return (self.type_bits & bits) != 0

    def matches_original_type(self, original_event_type: str | None) -> bool:
        """An untagged event reaches every binding; a tagged one only its own kind."""
        return original_event_type is None or original_event_type == self.original_event_type

    def unsink(self, bits: int) -> int:
        """Stop listening to bits (all of them when bits <= 0); return what is left."""
        if bits <= 0:
            self.type_bits = 0
        else:
            self.type_bits &= ~bits
        return self.type_bits

    def is_handler(self, handler: Handler | None) -> bool:
        """Compare against the user handler, looking through special-event wrappers."""
        if handler is None:
            raise BindingError("handler to compare against cannot be None", code="null_handler")
        if self.handler is None:
            return False
        return handler == original_handler(self.handler)

    @property
    def expired(self) -> bool:
        return self.times == 0

    def __repr__(self) -> str:
        return (
            f"<Binding bits={self.type_bits:#x} namespace={self.namespace!r} "
            f"original={self.original_event_type!r} times={self.times}>"
        )
