"""Test the in-memory DOM host."""

from unittest.mock import patch

import pytest

from domevents.core.errors import ScenarioError
from domevents.dom import Element, Event, SimpleHost, build_tree, dispatch, fire
from tests.mocks import RecordingNativeListener


class TestElement:
    """Test tree and selector helpers."""

    def test_contains_is_strict(self, root):
        a = root.find("a")
        c = root.find("c")
        assert a.contains(c)
        assert not a.contains(a)
        assert not c.contains(a)
        assert not a.contains(None)

    def test_append_moves_child(self, root):
        # Arrange
        other = root.find("other")
        a = root.find("a")

        # Act
        a.append(other)

        # Assert
        assert other.parent is a
        assert other not in root.children

    def test_matches_compound_selectors(self, root):
        c = root.find("c")
        assert c.matches("span")
        assert c.matches(".box.leaf")
        assert c.matches("span#c.box")
        assert c.matches("*")
        assert c.matches("p, .leaf")
        assert not c.matches("div")
        assert not c.matches("#a")

    def test_unsupported_selector_warns(self, root):
        with patch("domevents.dom.logger") as mock_logger:
            assert not root.matches("div > span")
            mock_logger.warning.assert_called_once()

    def test_repr(self, root):
        assert repr(root.find("c")) == "<span#c.box.leaf>"


class TestBuildTree:
    """Test building trees from mappings."""

    def test_classes_and_attributes(self):
        # Act
        node = build_tree({"tag": "a", "id": "x", "class": ["one", "two"], "attributes": {"href": "/"}})

        # Assert
        assert node.classes == ["one", "two"]
        assert node.attributes == {"href": "/"}

    def test_missing_tag(self):
        with pytest.raises(ScenarioError) as exc_info:
            build_tree({"id": "x"})
        assert exc_info.value.code == "invalid_node"

    def test_bad_child(self):
        with pytest.raises(ScenarioError):
            build_tree({"tag": "div", "children": ["oops"]})


class TestSimpleHost:
    """Test host primitives."""

    def test_match_chain_stops_at_root(self, root):
        # Arrange
        host = SimpleHost()
        a = root.find("a")

        # Act
        matches = host.match_chain(a, root.find("c"), [".box", "p", "div"])

        # Assert
        assert [e.id for e in matches[".box"]] == ["c", "b", "a"]
        assert "p" not in matches
        assert [e.id for e in matches["div"]] == ["b", "a"]

    def test_match_chain_outside_root(self, root):
        host = SimpleHost()
        assert host.match_chain(root.find("a"), root.find("other"), [".box"]) == {}

    def test_clock(self):
        assert SimpleHost(clock=lambda: 42.0).now() == 42.0
        assert SimpleHost().now() > 0


class TestDispatch:
    """Test bubbling."""

    def test_bubbles_to_sinking_listeners(self, root):
        # Arrange
        native = RecordingNativeListener()
        a = root.find("a")
        a.event_listener = native
        a.events_sunk = 0x1

        # Act
        event = fire(root.find("c"), "click")

        # Assert
        assert native.events == [event]
        assert event.current_target is None

    def test_unsunk_types_skipped(self, root):
        native = RecordingNativeListener()
        root.event_listener = native
        root.events_sunk = 0x1
        fire(root, "keyup")
        assert native.events == []

    def test_stop_propagation_ends_bubbling(self, root):
        # Arrange
        class Stopper:
            def on_browser_event(self, event):
                event.stop_propagation()

        outer = RecordingNativeListener()
        b = root.find("b")
        b.event_listener = Stopper()
        b.events_sunk = 0x1
        root.event_listener = outer
        root.events_sunk = 0x1

        # Act
        dispatch(Event("click", target=root.find("c")))

        # Assert
        assert outer.events == []

    def test_detached_element(self):
        node = Element("div")
        event = fire(node, "click")
        assert event.target is node
