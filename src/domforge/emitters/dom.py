"""
DOM-instruction emitter - lowers a node tree to imperative construction steps.

The walk mirrors the markup emitter (pre-order, children in order) so each
element's className carries the same identity token as its markup
counterpart. Component children are not inlined: they are constructed by
calling the component's registered factory, which lets every component ship
as its own script.

Example output for ``h("div", {"class": "app"}, h("h1", None, "Hi"))``::

    const el1 = document.createElement("div");
    el1.className = "df-el-1 app";
    const el2 = document.createElement("h1");
    el2.className = "df-el-2";
    el2.textContent = "Hi";
    el1.appendChild(el2);
    return el1;
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from itertools import count

from domforge.core.builder import DEFAULT_SIGIL, reference_name
from domforge.core.handlers import handler_expression
from domforge.core.nodes import Component, Element, Node

REGISTRY = "window.components"


# =============================================================================
# Values
# =============================================================================


@dataclass(slots=True, frozen=True)
class Literal:
    """A string emitted as a JSON literal."""

    text: str

    def to_js(self) -> str:
        return json.dumps(self.text)


@dataclass(slots=True, frozen=True)
class Reference:
    """A raw expression (usually a factory parameter name)."""

    name: str

    def to_js(self) -> str:
        return self.name


Value = Literal | Reference


def resolve_value(value: str, sigil: str = DEFAULT_SIGIL) -> Value:
    """Sigil-prefixed values become references, everything else a literal."""
    name = reference_name(value, sigil)
    return Literal(value) if name is None else Reference(name)


# =============================================================================
# Instructions
# =============================================================================


@dataclass(slots=True, frozen=True)
class CreateElement:
    var: str
    tag: str

    def to_js(self) -> str:
        return f"const {self.var} = document.createElement({json.dumps(self.tag)});"


@dataclass(slots=True, frozen=True)
class AssignClass:
    var: str
    value: str

    def to_js(self) -> str:
        return f"{self.var}.className = {json.dumps(self.value)};"


@dataclass(slots=True, frozen=True)
class SetAttribute:
    var: str
    name: str
    value: Value

    def to_js(self) -> str:
        return f"{self.var}.setAttribute({json.dumps(self.name)}, {self.value.to_js()});"


@dataclass(slots=True, frozen=True)
class AssignStyle:
    var: str
    value: Value

    def to_js(self) -> str:
        return f"{self.var}.style.cssText = {self.value.to_js()};"


@dataclass(slots=True, frozen=True)
class SetText:
    var: str
    value: Value

    def to_js(self) -> str:
        return f"{self.var}.textContent = {self.value.to_js()};"


@dataclass(slots=True, frozen=True)
class AssignClick:
    var: str
    expression: str

    def to_js(self) -> str:
        return f"{self.var}.onclick = function() {{ {self.expression}; }};"


@dataclass(slots=True, frozen=True)
class InvokeFactory:
    var: str
    key: str
    args: tuple[str, ...] = ()  # names passed through from the enclosing factory

    def to_js(self) -> str:
        return f"const {self.var} = {REGISTRY}[{json.dumps(self.key)}]({', '.join(self.args)});"


@dataclass(slots=True, frozen=True)
class AppendChild:
    parent: str
    child: str

    def to_js(self) -> str:
        return f"{self.parent}.appendChild({self.child});"


@dataclass(slots=True, frozen=True)
class ReturnNode:
    var: str

    def to_js(self) -> str:
        return f"return {self.var};"


Instruction = (
    CreateElement
    | AssignClass
    | SetAttribute
    | AssignStyle
    | SetText
    | AssignClick
    | InvokeFactory
    | AppendChild
    | ReturnNode
)


# =============================================================================
# Compilation
# =============================================================================


def compile_element(node: Node, var_prefix: str = "el", sigil: str = DEFAULT_SIGIL) -> list[Instruction]:
    """
    Compile a tree into the instructions that rebuild it.

    Variable names come from one counter shared by the whole call, so
    compiling the same tree twice yields identical output.
    """
    root = node.get_root() if isinstance(node, Component) else node
    instructions: list[Instruction] = []
    counter = count(1)

    def next_var() -> str:
        return f"{var_prefix}{next(counter)}"

    def walk(element: Element) -> str:
        var = next_var()
        instructions.append(CreateElement(var, element.tag))
        instructions.append(AssignClass(var, element.class_value()))

        for name, value in element.attributes.items():
            if name == "class":
                continue
            if name == "style":
                instructions.append(AssignStyle(var, resolve_value(value, sigil)))
            else:
                instructions.append(SetAttribute(var, name, resolve_value(value, sigil)))

        children = element.children
        if element.text is not None and not children:
            instructions.append(SetText(var, resolve_value(element.text, sigil)))

        if element.on_click is not None:
            instructions.append(AssignClick(var, handler_expression(element.on_click)))

        for child in children:
            match child:
                case Component():
                    child_var = next_var()
                    instructions.append(InvokeFactory(child_var, child.key, tuple(child.parameters)))
                case Element():
                    child_var = walk(child)
            instructions.append(AppendChild(var, child_var))

        return var

    instructions.append(ReturnNode(walk(root)))
    return instructions


def render_instructions(instructions: list[Instruction]) -> str:
    """Join instructions into a newline-separated script body."""
    return "\n".join(instruction.to_js() for instruction in instructions)


def compile_to_js(node: Node, var_prefix: str = "el", sigil: str = DEFAULT_SIGIL) -> str:
    return render_instructions(compile_element(node, var_prefix, sigil))


def compile_factory(component: Component, var_prefix: str = "el", sigil: str = DEFAULT_SIGIL) -> str:
    """
    Wrap a component's instructions as a registry assignment.

    Produces ``window.components["Key"] = function(p1, p2) { ... };``
    """
    body = compile_to_js(component.get_root(), var_prefix, sigil)
    indented = "\n".join(f"  {line}" for line in body.splitlines())
    params = ", ".join(component.parameters)
    return f"{REGISTRY}[{json.dumps(component.key)}] = function({params}) {{\n{indented}\n}};"
