"""
In-memory document used to execute compiled component factories in Python.

Only the handful of DOM operations generated scripts rely on are modelled:
element creation, className/style/text assignment, attributes, onclick,
appendChild, cloneNode, remove and getElementById. It backs the runtime
model in ``domforge.runtime.context`` and build previews.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from domforge.emitters.dom import (
    AppendChild,
    AssignClass,
    AssignClick,
    AssignStyle,
    CreateElement,
    Instruction,
    InvokeFactory,
    Literal,
    Reference,
    ReturnNode,
    SetAttribute,
    SetText,
    Value,
)
from domforge.emitters.markup import escape_attr, escape_text


class VirtualNode:
    """A detached-or-attached element in a VirtualDocument."""

    def __init__(self, tag: str):
        self.tag = tag
        self.class_name = ""
        self.style = ""
        self.text: str | None = None
        self.onclick: str | None = None
        self.attributes: dict[str, str] = {}
        self.children: list[VirtualNode] = []
        self.parent: VirtualNode | None = None

    def __repr__(self) -> str:
        return f"VirtualNode({self.tag!r}, class_name={self.class_name!r})"

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def append_child(self, child: VirtualNode) -> VirtualNode:
        if child.parent is not None:
            child.remove()
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def clone_node(self, deep: bool = True) -> VirtualNode:
        clone = VirtualNode(self.tag)
        clone.class_name = self.class_name
        clone.style = self.style
        clone.text = self.text
        clone.onclick = self.onclick
        clone.attributes = dict(self.attributes)
        if deep:
            for child in self.children:
                clone.append_child(child.clone_node(deep=True))
        return clone

    def iter(self) -> Iterator[VirtualNode]:
        """Pre-order iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def outer_html(self) -> str:
        """Serialize in the markup emitter's layout (class first, onclick last)."""
        attributes: dict[str, str] = {}
        if self.class_name:
            attributes["class"] = self.class_name
        attributes.update(self.attributes)
        if self.style:
            attributes["style"] = self.style
        if self.onclick is not None:
            attributes["onclick"] = self.onclick
        rendered = "".join(f' {k}="{escape_attr(v)}"' for k, v in attributes.items())
        open_tag = f"<{self.tag}{rendered}>"
        close_tag = f"</{self.tag}>"
        if self.children:
            body = "\n".join(child.outer_html() for child in self.children)
            return f"{open_tag}\n{body}\n{close_tag}"
        if self.text is not None:
            return f"{open_tag}{escape_text(self.text)}{close_tag}"
        return f"{open_tag}{close_tag}"


class VirtualDocument:
    """A document with a body and id lookup."""

    def __init__(self) -> None:
        self.body = VirtualNode("body")

    def create_element(self, tag: str) -> VirtualNode:
        return VirtualNode(tag)

    def get_element_by_id(self, element_id: str) -> VirtualNode | None:
        for node in self.body.iter():
            if node.id == element_id:
                return node
        return None

    def add_target(self, element_id: str, tag: str = "div") -> VirtualNode:
        """Append an element with the given id to the body (a mount point)."""
        node = self.create_element(tag)
        node.set_attribute("id", element_id)
        return self.body.append_child(node)


def _evaluate(value: Value, bindings: Mapping[str, Any]) -> str:
    match value:
        case Literal(text=text):
            return text
        case Reference(name=name):
            if name not in bindings:
                raise NameError(f"Unbound reference in generated code: {name}")
            return str(bindings[name])
    raise TypeError(f"Unknown value {value!r}")


def instantiate(
    instructions: Sequence[Instruction],
    document: VirtualDocument,
    registry: Mapping[str, Callable[..., VirtualNode]],
    bindings: Mapping[str, Any] | None = None,
) -> VirtualNode:
    """
    Execute compiled instructions against a virtual document.

    Args:
        instructions: Output of ``compile_element``
        document: Document used to create elements
        registry: Component factories, keyed like ``window.components``
        bindings: Values for raw references (factory parameters)

    Returns:
        The node named by the final return instruction
    """
    bindings = bindings or {}
    env: dict[str, VirtualNode] = {}

    for instruction in instructions:
        match instruction:
            case CreateElement(var=var, tag=tag):
                env[var] = document.create_element(tag)
            case AssignClass(var=var, value=value):
                env[var].class_name = value
            case SetAttribute(var=var, name=name, value=value):
                env[var].set_attribute(name, _evaluate(value, bindings))
            case AssignStyle(var=var, value=value):
                env[var].style = _evaluate(value, bindings)
            case SetText(var=var, value=value):
                env[var].text = _evaluate(value, bindings)
            case AssignClick(var=var, expression=expression):
                env[var].onclick = expression
            case InvokeFactory(var=var, key=key, args=args):
                factory = registry.get(key)
                if factory is None:
                    raise LookupError(f"No factory registered for component {key}")
                env[var] = factory(*(_evaluate(Reference(name), bindings) for name in args))
            case AppendChild(parent=parent, child=child):
                env[parent].append_child(env[child])
            case ReturnNode(var=var):
                return env[var]

    raise ValueError("Instruction sequence has no return instruction")


def make_factory(
    instructions: Sequence[Instruction],
    parameters: Sequence[str],
    document: VirtualDocument,
    registry: Mapping[str, Callable[..., VirtualNode]],
) -> Callable[..., VirtualNode]:
    """Build a callable that behaves like a generated ``window.components`` factory."""

    def factory(*args: Any) -> VirtualNode:
        # Missing arguments read as undefined, as they would in the browser
        bindings = {
            name: args[i] if i < len(args) else "undefined" for i, name in enumerate(parameters)
        }
        return instantiate(instructions, document, registry, bindings)

    return factory
