"""Domain exceptions."""

from __future__ import annotations


class DomEventsError(Exception):
    """Base for domevents errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(DomEventsError):
    """Config validation or load failure."""


class BindingError(DomEventsError):
    """Misuse of the binding API that cannot degrade to a no-op."""


class ScenarioError(DomEventsError):
    """Malformed replay scenario."""
