"""
domforge - compile JSX-style component trees to static HTML and DOM factories.

A tree built with ``h`` is lowered twice: to markup for the initial page and
to imperative DOM construction scripts, one factory per component, which a
small client runtime mounts on demand.
"""

from __future__ import annotations

from domforge._version import get_version
from domforge.compiler import BuildArtifacts, compile_components, compile_project, write_artifacts
from domforge.core.builder import Fragment, ScalarChildPolicy, TreeBuilder, h, on_load
from domforge.core.errors import BuildError, ConfigError, DomForgeError, NotRenderedError, TreeError
from domforge.core.handlers import CallHandler, RenderHandler
from domforge.core.nodes import Component, Element
from domforge.emitters import compile_element, compile_factory, flatten, flatten_stylesheet, serialize
from domforge.runtime import RuntimeContext, VirtualDocument

__version__ = get_version()

__all__ = [
    "__version__",
    # Authoring
    "h",
    "Fragment",
    "on_load",
    "RenderHandler",
    "CallHandler",
    "TreeBuilder",
    "ScalarChildPolicy",
    # Nodes
    "Element",
    "Component",
    # Emitters
    "serialize",
    "compile_element",
    "compile_factory",
    "flatten",
    "flatten_stylesheet",
    # Build
    "BuildArtifacts",
    "compile_project",
    "compile_components",
    "write_artifacts",
    # Runtime
    "RuntimeContext",
    "VirtualDocument",
    # Errors
    "DomForgeError",
    "BuildError",
    "TreeError",
    "NotRenderedError",
    "ConfigError",
]
