"""Shared fixtures: fresh global state, a controllable host and a small tree."""

from __future__ import annotations

import pytest

from domevents.config import cfg
from domevents.dom import Element, SimpleHost, build_tree
from domevents.events import special
from domevents.listener import listeners, set_default_host
from tests.mocks import FakeClock, Recorder


@pytest.fixture(autouse=True)
def _isolated_state():
    """Each test starts with default config, built-in special events and no listeners."""
    saved_special = dict(special)
    cfg.reload({}, validate=False)
    yield
    special.clear()
    special.update(saved_special)
    listeners.clear()
    set_default_host(None)
    cfg.reload({}, validate=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def host(clock: FakeClock) -> SimpleHost:
    return SimpleHost(clock=clock)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def root() -> Element:
    """div#root > div#a.box > div#b.box > span#c.box.leaf, plus p#other under root."""
    return build_tree(
        {
            "tag": "div",
            "id": "root",
            "children": [
                {
                    "tag": "div",
                    "id": "a",
                    "class": "box",
                    "children": [
                        {
                            "tag": "div",
                            "id": "b",
                            "class": "box",
                            "children": [{"tag": "span", "id": "c", "class": "box leaf"}],
                        }
                    ],
                },
                {"tag": "p", "id": "other"},
            ],
        }
    )
