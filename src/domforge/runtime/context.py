"""
Runtime context - the page-session state behind renderComponent/removeComponent.

This is the Python model of the shipped client runtime (see
``domforge.runtime.js``). It holds the factory registry and the node cache
for one page session and drives any document implementing the small
protocol below, typically a ``VirtualDocument``.

Failures here are never fatal: a missing mount target, element or factory is
logged and the call returns without raising.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from types import MappingProxyType
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class DomNode(Protocol):
    def append_child(self, child: Any) -> Any: ...

    def clone_node(self, deep: bool = True) -> Any: ...

    def remove(self) -> None: ...


class Document(Protocol):
    def get_element_by_id(self, element_id: str) -> DomNode | None: ...


ComponentFactory = Callable[..., DomNode]

# Requests the script for a component key; the script registers the factory
# (through RuntimeContext.register) once it has run.
ScriptLoader = Callable[[str], None]


class RuntimeContext:
    """
    Registry and cache for one page session.

    Args:
        document: Document to look mount targets up in
        loader: Optional script loader used by ``load_component``
    """

    def __init__(self, document: Document, loader: ScriptLoader | None = None):
        self.document = document
        self.loader = loader
        self._registry: dict[str, ComponentFactory] = {}
        self._cache: dict[str, DomNode] = {}
        self._pending: dict[str, Future[str]] = {}

    @property
    def registry(self) -> Mapping[str, ComponentFactory]:
        return MappingProxyType(self._registry)

    def is_registered(self, key: str) -> bool:
        return key in self._registry

    def is_cached(self, key: str) -> bool:
        return key in self._cache

    def register(self, key: str, factory: ComponentFactory) -> None:
        """Register a factory (what a loaded component script does) and settle pending loads."""
        self._registry[key] = factory
        pending = self._pending.pop(key, None)
        if pending is not None:
            pending.set_result(key)

    def render_component(self, key: str, parent_id: str, *args: Any) -> DomNode | None:
        """
        Mount a clone of component ``key`` under element ``parent_id``.

        The factory runs once per session (with the first call's arguments);
        every call appends a fresh deep clone of the cached node.
        """
        parent = self.document.get_element_by_id(parent_id)
        if parent is None:
            logger.error("Render target not found: #%s", parent_id)
            return None

        factory = self._registry.get(key)
        if factory is None:
            logger.error("Component not found: %s", key)
            return None

        if key not in self._cache:
            self._cache[key] = factory(*args)

        node = self._cache[key].clone_node(True)
        parent.append_child(node)
        return node

    def remove_component(self, element_id: str) -> bool:
        """Detach element ``element_id`` from its parent. Returns False if it was missing."""
        element = self.document.get_element_by_id(element_id)
        if element is None:
            logger.error("Element not found: #%s", element_id)
            return False
        element.remove()
        return True

    def load_component(self, key: str) -> Future[str]:
        """
        Request the script for component ``key``.

        Returns a future that resolves with ``key`` once the factory has been
        registered. Already-registered components resolve immediately;
        concurrent requests for the same key share one load.
        """
        if key in self._registry:
            done: Future[str] = Future()
            done.set_result(key)
            return done

        if key in self._pending:
            return self._pending[key]

        future: Future[str] = Future()
        if self.loader is None:
            logger.error("No script loader configured; cannot load component %s", key)
            future.set_exception(LookupError(f"Cannot load component {key}: no loader"))
            return future

        self._pending[key] = future
        try:
            self.loader(key)
        except Exception as e:
            logger.error("Failed to load component %s: %s", key, e)
            self._pending.pop(key, None)
            if not future.done():
                future.set_exception(e)
        return future

    def fail_load(self, key: str, error: Exception) -> None:
        """Settle a pending load as failed (a script error event)."""
        pending = self._pending.pop(key, None)
        if pending is not None:
            logger.error("Component script for %s failed: %s", key, error)
            pending.set_exception(error)
