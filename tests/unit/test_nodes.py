"""Tests for the node model."""

import pytest

from domforge.core.errors import NotRenderedError, TreeError
from domforge.core.handlers import RenderHandler
from domforge.core.nodes import Component, Element, IdentityCounter


class TestIdentityCounter:
    """Token minting."""

    def test_tokens_are_sequential(self) -> None:
        counter = IdentityCounter()
        assert counter.next_token() == "df-el-1"
        assert counter.next_token() == "df-el-2"
        assert counter.issued == 2

    def test_custom_prefix(self) -> None:
        counter = IdentityCounter(prefix="app-")
        assert counter.next_token() == "app-1"

    def test_reset_restarts_numbering(self) -> None:
        counter = IdentityCounter()
        counter.next_token()
        counter.next_token()
        counter.reset()
        assert counter.next_token() == "df-el-1"


class TestElement:
    """Element construction and mutation."""

    def test_accessors(self) -> None:
        el = Element("div", "t-1")
        el.set_attribute("id", "main")
        el.set_text("hello")
        handler = RenderHandler(component="Card", target="main")
        el.set_on_click(handler)

        assert el.tag == "div"
        assert el.token == "t-1"
        assert el.attributes == {"id": "main"}
        assert el.text == "hello"
        assert el.on_click == handler

    def test_attribute_last_write_wins(self) -> None:
        el = Element("a", "t-1")
        el.set_attribute("href", "/one")
        el.set_attribute("href", "/two")
        assert el.attributes == {"href": "/two"}

    def test_attributes_are_a_copy(self) -> None:
        el = Element("a", "t-1")
        el.attributes["href"] = "/x"
        assert el.attributes == {}

    def test_class_value_puts_token_first(self) -> None:
        el = Element("div", "t-1")
        assert el.class_value() == "t-1"
        el.set_attribute("class", "card wide")
        assert el.class_value() == "t-1 card wide"

    def test_add_child_sets_parent(self) -> None:
        parent = Element("ul", "t-1")
        child = Element("li", "t-2")
        parent.add_child(child)
        assert parent.children == [child]
        assert child.parent is parent

    def test_child_cannot_have_two_owners(self) -> None:
        first = Element("div", "t-1")
        second = Element("div", "t-2")
        child = Element("span", "t-3")
        first.add_child(child)
        with pytest.raises(TreeError):
            second.add_child(child)

    def test_cycles_are_rejected(self) -> None:
        outer = Element("div", "t-1")
        inner = Element("div", "t-2")
        outer.add_child(inner)
        with pytest.raises(TreeError):
            inner.add_child(outer)
        with pytest.raises(TreeError):
            outer.add_child(outer)

    def test_component_root_cannot_be_added_directly(self) -> None:
        root = Element("div", "t-1")
        Component(root, "Card")
        with pytest.raises(TreeError):
            Element("main", "t-2").add_child(root)

    def test_walk_is_preorder_and_crosses_components(self) -> None:
        root = Element("div", "t-1")
        a = Element("a", "t-2")
        card_root = Element("section", "t-3")
        card_child = Element("p", "t-4")
        b = Element("b", "t-5")
        card_root.add_child(card_child)
        root.add_child(a)
        root.add_child(Component(card_root, "Card"))
        root.add_child(b)

        assert [el.token for el in root.walk()] == ["t-1", "t-2", "t-3", "t-4", "t-5"]


class TestComponent:
    """Component boundaries."""

    def test_fields(self) -> None:
        root = Element("div", "t-1")
        component = Component(root, "Greeting", ["name", "title"])
        assert component.key == "Greeting"
        assert component.parameters == ["name", "title"]
        assert component.get_root() is root
        assert root.owner is component

    def test_on_load_hooks(self) -> None:
        component = Component(Element("div", "t-1"), "App")
        hook = RenderHandler(component="Card", target="slot")
        component.add_on_load_hook(hook)
        assert component.get_on_load_hooks() == [hook]

    def test_root_must_be_detached(self) -> None:
        parent = Element("div", "t-1")
        child = Element("p", "t-2")
        parent.add_child(child)
        with pytest.raises(TreeError):
            Component(child, "Para")

    def test_missing_root_is_not_rendered(self) -> None:
        component = Component(Element("div", "t-1"), "App")
        component._root = None
        with pytest.raises(NotRenderedError):
            component.get_root()

    def test_component_mounted_once(self) -> None:
        component = Component(Element("div", "t-1"), "Card")
        Element("main", "t-2").add_child(component)
        with pytest.raises(TreeError):
            Element("aside", "t-3").add_child(component)

    def test_walk_components(self) -> None:
        inner = Component(Element("span", "t-3"), "Badge")
        card_root = Element("div", "t-2")
        card_root.add_child(inner)
        card = Component(card_root, "Card")
        app_root = Element("main", "t-1")
        app_root.add_child(card)
        app = Component(app_root, "App")

        assert [c.key for c in app.walk_components()] == ["App", "Card", "Badge"]
