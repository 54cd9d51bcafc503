"""Tests for the markup emitter."""

from typing import Any

from domforge.core.builder import TreeBuilder
from domforge.core.handlers import CallHandler, RenderHandler
from domforge.core.nodes import Element
from domforge.emitters.markup import escape_attr, escape_text, serialize


class TestEscaping:
    """Text and attribute escaping."""

    def test_escape_text(self) -> None:
        assert escape_text('<b>&"</b>') == "&lt;b&gt;&amp;&quot;&lt;/b&gt;"

    def test_escape_attr(self) -> None:
        assert escape_attr('a"b') == "a&quot;b"
        assert escape_attr('a&b"') == "a&amp;b&quot;"

    def test_text_is_escaped_in_output(self, builder: TreeBuilder) -> None:
        el = builder.h("p", None, '<b>&"</b>')
        assert serialize(el) == f'<p class="{el.token}">&lt;b&gt;&amp;&quot;&lt;/b&gt;</p>'

    def test_attribute_is_escaped_in_output(self, builder: TreeBuilder) -> None:
        el = builder.h("a", {"title": 'a"b'})
        assert serialize(el) == f'<a title="a&quot;b" class="{el.token}"></a>'


class TestSerialize:
    """Element serialization."""

    def test_end_to_end_tree(self, app_tree: Element) -> None:
        h1, button = app_tree.children
        assert serialize(app_tree) == (
            f'<div class="{app_tree.token} app">\n'
            f'<h1 class="{h1.token}">Hi</h1>\n'
            f'<button class="{button.token}" onclick="f(1)"></button>\n'
            "</div>"
        )

    def test_empty_element_has_explicit_close(self, builder: TreeBuilder) -> None:
        el = builder.h("br")
        assert serialize(el) == f'<br class="{el.token}"></br>'

    def test_user_class_keeps_its_position(self, builder: TreeBuilder) -> None:
        el = builder.h("div", {"class": "card", "id": "x"})
        assert serialize(el) == f'<div class="{el.token} card" id="x"></div>'

    def test_render_handler_becomes_onclick(self, builder: TreeBuilder) -> None:
        el = builder.h("button", {"onClick": RenderHandler(component="Card", target="slot")})
        assert serialize(el) == (
            f'<button class="{el.token}" '
            'onclick="renderComponent(&quot;Card&quot;, &quot;slot&quot;)"></button>'
        )

    def test_call_handler_string_args_are_escaped(self, builder: TreeBuilder) -> None:
        el = builder.h("button", {"onClick": CallHandler(name="say", args={"msg": "hi"})})
        assert 'onclick="say(&quot;hi&quot;)"' in serialize(el)

    def test_component_is_transparent(self, builder: TreeBuilder) -> None:
        def Card(props: dict[str, Any]) -> Element:
            return builder.h("section", {"class": "card"}, props["title"])

        card = builder.h(Card, {"title": "T"})
        page = builder.h("main", None, card)
        root = card.get_root()
        assert serialize(page) == (
            f'<main class="{page.token}">\n'
            f'<section class="{root.token} card">T</section>\n'
            "</main>"
        )
        assert serialize(card) == f'<section class="{root.token} card">T</section>'

    def test_children_take_priority_over_text(self) -> None:
        el = Element("div", "t-1")
        el.set_text("ignored")
        el.add_child(Element("span", "t-2"))
        assert serialize(el) == '<div class="t-1">\n<span class="t-2"></span>\n</div>'

    def test_every_token_is_embedded(self, app_tree: Element) -> None:
        html = serialize(app_tree)
        for element in app_tree.walk():
            assert f'class="{element.token}' in html

    def test_serialize_is_stable(self, app_tree: Element) -> None:
        assert serialize(app_tree) == serialize(app_tree)
