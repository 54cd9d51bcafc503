"""
Core domforge types: node model, handler descriptors, tree builder, config.
"""

from domforge.core.builder import (
    INLINE_SUFFIX,
    Fragment,
    ScalarChildPolicy,
    TreeBuilder,
    current_builder,
    h,
    on_load,
)
from domforge.core.errors import (
    BuildError,
    ConfigError,
    DomForgeError,
    NotRenderedError,
    TreeError,
)
from domforge.core.handlers import CallHandler, RenderHandler, coerce_handler, handler_expression
from domforge.core.nodes import Component, Element, IdentityCounter, Node

__all__ = [
    # Nodes
    "Element",
    "Component",
    "Node",
    "IdentityCounter",
    # Handlers
    "RenderHandler",
    "CallHandler",
    "coerce_handler",
    "handler_expression",
    # Builder
    "TreeBuilder",
    "ScalarChildPolicy",
    "INLINE_SUFFIX",
    "current_builder",
    "h",
    "Fragment",
    "on_load",
    # Errors
    "DomForgeError",
    "BuildError",
    "TreeError",
    "NotRenderedError",
    "ConfigError",
]
