"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from domevents.core.errors import ConfigurationError

# Env keys that override config (loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "DOMEVENTS_DEBOUNCE_WINDOW_MS",
    "DOMEVENTS_RAISE_HANDLER_ERRORS",
)


def _load_env_overrides() -> dict[str, str]:
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.lower()
    if v in ("1", "true", "yes"):
        return True
    if v in ("0", "false", "no"):
        return False
    return None


class Config:
    """Config accessor for the dispatch engine."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug(
            "Config reloaded: debounce {}ms on {}",
            self.debounce_window_ms,
            ", ".join(sorted(self.debounce_tags)) or "no tags",
        )

    def _validate(self) -> None:
        """Validate config structure; raise ConfigurationError on failure."""
        window = self._data.get("debounce_window_ms")
        if window is not None:
            if isinstance(window, bool) or not isinstance(window, (int, float)):
                raise ConfigurationError(
                    "debounce_window_ms must be a number",
                    code="invalid_debounce_window",
                    details={"type": type(window).__name__},
                )
            if window < 0:
                raise ConfigurationError(
                    "debounce_window_ms must not be negative",
                    code="invalid_debounce_window",
                    details={"value": window},
                )
        tags = self._data.get("debounce_tags")
        if tags is not None and not isinstance(tags, list):
            raise ConfigurationError(
                "debounce_tags must be a list",
                code="invalid_debounce_tags",
                details={"type": type(tags).__name__},
            )
        env_window = self._env.get("DOMEVENTS_DEBOUNCE_WINDOW_MS", "")
        if env_window:
            try:
                float(env_window)
            except ValueError as exc:
                raise ConfigurationError(
                    "DOMEVENTS_DEBOUNCE_WINDOW_MS must be a number",
                    code="invalid_debounce_window",
                    details={"value": env_window},
                    original_error=exc,
                ) from exc

    @property
    def debounce_window_ms(self) -> float:
        """Window in which a repeated event type on a debounced tag is dropped."""
        env_val = self._env.get("DOMEVENTS_DEBOUNCE_WINDOW_MS", "")
        if env_val:
            try:
                return float(env_val)
            except ValueError:
                pass
        return float(self._data.get("debounce_window_ms", 10))

    @property
    def debounce_tags(self) -> frozenset[str]:
        """Lower-case tag names whose duplicated events are debounced."""
        val = self._data.get("debounce_tags")
        if isinstance(val, list):
            return frozenset(str(t).lower() for t in val)
        return frozenset({"body"})

    @property
    def focus_tabindex(self) -> bool:
        return bool(self._data.get("focus_tabindex", True))

    @property
    def raise_handler_errors(self) -> bool:
        env_val = self._env.get("DOMEVENTS_RAISE_HANDLER_ERRORS", "")
        parsed = _parse_bool_env(env_val)
        if parsed is not None:
            return parsed
        return bool(self._data.get("raise_handler_errors", False))


# Global config instance (set by __main__)
cfg: Config = Config({})
