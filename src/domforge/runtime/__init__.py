"""
domforge client runtime.

This module provides:
- The shipped JavaScript runtime (renderComponent / removeComponent / loadComponent)
- RuntimeContext, the Python model of that runtime's registry and cache
- A virtual document that executes compiled component factories

Example usage:
    >>> from domforge.runtime import RuntimeContext, VirtualDocument
    >>>
    >>> document = VirtualDocument()
    >>> document.add_target("slot")
    >>> runtime = RuntimeContext(document)
    >>> runtime.register("Card", card_factory)
    >>> runtime.render_component("Card", "slot")
"""

from domforge.runtime.context import RuntimeContext
from domforge.runtime.js import RUNTIME_GLOBALS, get_runtime_js
from domforge.runtime.virtual_dom import (
    VirtualDocument,
    VirtualNode,
    instantiate,
    make_factory,
)

__all__ = [
    "RuntimeContext",
    "get_runtime_js",
    "RUNTIME_GLOBALS",
    "VirtualDocument",
    "VirtualNode",
    "instantiate",
    "make_factory",
]
