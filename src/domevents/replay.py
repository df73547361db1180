"""Scenario replay: build a tree, register bindings, fire events, record what ran.

A scenario is a YAML mapping with a ``tree`` and an ordered list of ``steps``::

    tree:
      tag: body
      id: root
      children:
        - {tag: div, id: outer, class: box, children: [{tag: span, id: inner}]}
    steps:
      - {bind: "click.ui", element: outer, label: outer-click}
      - {live: "click", element: root, selector: ".box", label: box, returns: false}
      - {fire: click, target: inner}
      - {unbind: ".ui", element: outer}
      - {die: "click", element: root, selector: ".box"}
      - {trigger: mouseenter, target: outer}
      - {clean: outer}

``fire`` and ``trigger`` steps advance a virtual clock by ``after_ms``
(default 1000) before the event goes out.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from domevents.core.errors import ScenarioError
from domevents.dom import Element, SimpleHost, build_tree, fire, trigger
from domevents.handlers import Handler
from domevents.listener import EventsListener, clean


@dataclass
class FireRecord:
    """One handler invocation observed during a replay."""

    label: str
    event_type: str
    element_id: str
    data: Any = None

    def __str__(self) -> str:
        return f"{self.label} {self.event_type} {self.element_id or '-'}"


def load_scenario(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}", code="missing_scenario")
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ScenarioError(f"Failed to parse scenario {path}", code="invalid_yaml", original_error=exc) from exc
    if not isinstance(data, dict):
        raise ScenarioError(f"Scenario {path} must be a mapping", code="invalid_scenario")
    return data


def _times(step: dict[str, Any]) -> int:
    try:
        return int(step.get("times", -1))
    except (TypeError, ValueError) as exc:
        raise ScenarioError(
            f"times must be an integer, got {step.get('times')!r}",
            code="invalid_times",
            details={"step": step},
            original_error=exc,
        ) from exc


class Replay:
    """Runs scenario steps against an in-memory tree."""

    def __init__(self, scenario: dict[str, Any], host: SimpleHost | None = None) -> None:
        if "tree" not in scenario:
            raise ScenarioError("scenario has no tree", code="missing_tree")
        self._clock_ms = 0.0
        self.host = host or SimpleHost(clock=lambda: self._clock_ms)
        self.root = build_tree(scenario["tree"])
        self.steps: list[dict[str, Any]] = list(scenario.get("steps") or [])
        self.records: list[FireRecord] = []
        self._touched: list[Element] = []

    def element(self, element_id: str | None) -> Element:
        if element_id is None:
            return self.root
        found = self.root.find(str(element_id))
        if found is None:
            raise ScenarioError(f"no element with id {element_id!r}", code="unknown_element")
        return found

    def _handler(self, label: str, returns: Any) -> Handler:
        def handler(event: Any, data: Any) -> Any:
            current = event.current_target
            self.records.append(FireRecord(label, event.type, getattr(current, "id", ""), data))
            return returns

        return handler

    def _listener(self, step: dict[str, Any]) -> EventsListener:
        element = self.element(step.get("element"))
        if element not in self._touched:
            self._touched.append(element)
        return EventsListener.get_instance(element, self.host)

    def run(self) -> list[FireRecord]:
        for index, step in enumerate(self.steps):
            if not isinstance(step, dict):
                raise ScenarioError(f"step {index} must be a mapping", code="invalid_step", details={"index": index})
            self.run_step(step)
        return self.records

    def run_step(self, step: dict[str, Any]) -> None:
        label = str(step.get("label", ""))
        if "bind" in step:
            self._listener(step).bind(
                step["bind"],
                self._handler(label or step["bind"], step.get("returns")),
                data=step.get("data"),
                times=_times(step),
            )
        elif "live" in step:
            if "selector" not in step:
                raise ScenarioError("live step needs a selector", code="missing_selector", details={"step": step})
            self._listener(step).live(
                step["live"],
                str(step["selector"]),
                self._handler(label or step["live"], step.get("returns")),
                data=step.get("data"),
                times=_times(step),
            )
        elif "unbind" in step:
            self._listener(step).unbind(step["unbind"] or 0)
        elif "die" in step:
            self._listener(step).die(step["die"] or 0, step.get("selector"))
        elif "fire" in step or "trigger" in step:
            self._fire_step(step)
        elif "clean" in step:
            clean(self.element(step["clean"]))
        else:
            raise ScenarioError(f"unknown step {step!r}", code="unknown_step", details={"step": step})
        logger.debug("Replayed step {}", step)

    def _fire_step(self, step: dict[str, Any]) -> None:
        # Events are spaced out so the duplicate-event window only applies when asked for
        self._clock_ms += float(step.get("after_ms", 1000))
        target = self.element(step.get("target"))
        related = self.element(step["related"]) if step.get("related") else None
        if "fire" in step:
            fire(target, str(step["fire"]), related)
        else:
            trigger(target, str(step["trigger"]), related)

    def close(self) -> None:
        """Tear down every listener the replay created."""
        for element in self._touched:
            clean(element)
        self._touched = []


def replay(scenario: dict[str, Any], host: SimpleHost | None = None) -> list[FireRecord]:
    runner = Replay(scenario, host)
    try:
        return runner.run()
    finally:
        runner.close()
