"""
Emitters lowering a node tree to text artifacts.

- markup: static HTML
- dom: imperative DOM construction steps (component factories)
- styles: flat CSS from nested style rules
"""

from domforge.emitters.dom import (
    Instruction,
    compile_element,
    compile_factory,
    compile_to_js,
    render_instructions,
)
from domforge.emitters.markup import escape_attr, escape_text, serialize
from domforge.emitters.styles import flatten, flatten_stylesheet

__all__ = [
    # Markup
    "serialize",
    "escape_text",
    "escape_attr",
    # DOM instructions
    "Instruction",
    "compile_element",
    "compile_to_js",
    "compile_factory",
    "render_instructions",
    # Styles
    "flatten",
    "flatten_stylesheet",
]
