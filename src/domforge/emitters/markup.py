"""
Markup emitter - lowers a node tree to an HTML string.

Every element carries its identity token as the first entry of its class
attribute, so scripts generated for the same tree can find it again.
"""

from __future__ import annotations

from domforge.core.handlers import handler_expression
from domforge.core.nodes import Component, Element, Node


def escape_text(text: str) -> str:
    """Escape text content for an HTML body."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def escape_attr(value: str) -> str:
    """Escape a double-quoted attribute value."""
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _open_tag(element: Element) -> str:
    attributes = element.attributes
    attributes["class"] = element.class_value()
    if element.on_click is not None:
        attributes["onclick"] = handler_expression(element.on_click)
    rendered = "".join(f' {name}="{escape_attr(value)}"' for name, value in attributes.items())
    return f"<{element.tag}{rendered}>"


def serialize(node: Node) -> str:
    """
    Serialize an element (or component) and its subtree to HTML.

    Children are joined with newlines between the open and close tags.
    Text is only emitted for childless elements. Components are transparent:
    their root element is serialized in their place.
    """
    match node:
        case Component():
            return serialize(node.get_root())
        case Element():
            element = node
        case _:
            raise TypeError(f"Cannot serialize {type(node).__name__}")

    open_tag = _open_tag(element)
    close_tag = f"</{element.tag}>"

    children = element.children
    if children:
        body = "\n".join(serialize(child) for child in children)
        return f"{open_tag}\n{body}\n{close_tag}"

    if element.text is not None:
        return f"{open_tag}{escape_text(element.text)}{close_tag}"

    return f"{open_tag}{close_tag}"
