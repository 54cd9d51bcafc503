"""
Tree builder - evaluates authored components into a node tree.

The builder is the JSX-style factory. Authored code calls ``h`` the way
compiled JSX calls its factory:

    >>> from domforge import h
    >>>
    >>> def Card(props):
    ...     return h("div", {"class": "card"}, h("h2", None, props["title"]))
    >>>
    >>> def App():
    ...     return h("main", {"id": "app"}, h(Card, {"title": "Hello"}))

Each builder owns the identity counter used to mint element tokens. The
module-level ``h`` and ``Fragment`` delegate to the builder activated with
``TreeBuilder.activate()`` (or to a process default when none is active).
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Any

from domforge.core.errors import make_build_error
from domforge.core.handlers import CallHandler, RenderHandler, coerce_handler
from domforge.core.nodes import Component, Element, IdentityCounter, Node

logger = logging.getLogger(__name__)

# Callables whose name ends with this suffix are spliced inline instead of
# becoming a component boundary.
INLINE_SUFFIX = "_INNER"

# Values starting with the sigil are emitted as raw expressions by the
# DOM-instruction emitter.
DEFAULT_SIGIL = "$"

ON_LOAD_ATTR = "__domforge_on_load__"

_CAMEL_RE = re.compile(r"([A-Z])")


class ScalarChildPolicy(str, Enum):
    """How several scalar children of one element combine into its text."""

    LAST_WINS = "last"  # each scalar child overwrites the previous text
    CONCAT = "concat"  # scalar children are joined in order


def to_css_property(name: str) -> str:
    """Convert a camelCase style key to a kebab-case CSS property name."""
    return _CAMEL_RE.sub(r"-\1", name).lower()


def style_text(style: Mapping[str, Any]) -> str:
    """Join a style mapping into inline style text (``font-size:12px;color:red``)."""
    return ";".join(
        f"{to_css_property(prop)}:{_stringify(value)}"
        for prop, value in style.items()
        if value is not None
    )


def reference_name(value: str, sigil: str = DEFAULT_SIGIL) -> str | None:
    """Return the bound name of a sigil-prefixed value (``"$title"`` -> ``"title"``), else None."""
    if value.startswith(sigil) and len(value) > len(sigil):
        return value[len(sigil) :]
    return None


def bound_names(root: Element, sigil: str = DEFAULT_SIGIL) -> list[str]:
    """
    Names referenced through sigil values anywhere below ``root``.

    Nested component subtrees are included, since their factories receive
    the same names from the enclosing factory. Order is first use, pre-order.
    """
    names: list[str] = []
    for element in root.walk():
        values = [v for k, v in element.attributes.items() if k != "class"]
        if element.text is not None and not element.children:
            values.append(element.text)
        for value in values:
            name = reference_name(value, sigil)
            if name is not None and name not in names:
                names.append(name)
    return names


def component_parameters(fn: Callable[..., Any]) -> list[str]:
    """Return the positional parameter names a root component declares."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return []
    return [
        p.name
        for p in signature.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]


def on_load(*hooks: RenderHandler | CallHandler) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach on-load hooks to a component callable.

    Example:
        @on_load(CallHandler(name="initCharts"))
        def Dashboard(props): ...
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        existing = list(getattr(fn, ON_LOAD_ATTR, ()))
        setattr(fn, ON_LOAD_ATTR, existing + list(hooks))
        return fn

    return decorator


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _flatten_children(children: Iterable[Any]) -> Iterator[Any]:
    for child in children:
        if isinstance(child, (list, tuple)):
            yield from _flatten_children(child)
        else:
            yield child


def _callable_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


class TreeBuilder:
    """
    Evaluates ``h(type, props, *children)`` calls into Elements and Components.

    Args:
        counter: Identity counter to mint tokens from (a fresh one by default)
        scalar_policy: How multiple scalar children combine into text
        sigil: Prefix marking live-binding placeholders
    """

    def __init__(
        self,
        counter: IdentityCounter | None = None,
        scalar_policy: ScalarChildPolicy = ScalarChildPolicy.LAST_WINS,
        sigil: str = DEFAULT_SIGIL,
    ):
        self.counter = counter or IdentityCounter()
        self.scalar_policy = ScalarChildPolicy(scalar_policy)
        self.sigil = sigil
        # On-load hooks of inline callables, keyed by the spliced element,
        # waiting for the enclosing component to claim them
        self._inline_hooks: list[tuple[Element, list[RenderHandler | CallHandler]]] = []

    def reset(self) -> None:
        """Start a new build: token numbering restarts."""
        self.counter.reset()
        self._inline_hooks.clear()

    @contextmanager
    def activate(self) -> Iterator[TreeBuilder]:
        """Route module-level ``h``/``Fragment`` calls to this builder."""
        token = _active_builder.set(self)
        try:
            yield self
        finally:
            _active_builder.reset(token)

    def element(self, tag: str) -> Element:
        return Element(tag, self.counter.next_token())

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    def build(self, type_: str | Callable[..., Any], props: Mapping[str, Any] | None = None, *children: Any) -> Node:
        """Build one node. Tag strings become Elements, callables are invoked."""
        if isinstance(type_, str):
            return self._build_element(type_, props or {}, children)
        if self._is_fragment(type_):
            return self.fragment(self._merge_children(props, children))
        if callable(type_):
            return self._build_component(type_, props, children)
        raise make_build_error(f"Cannot build a node from {type_!r}")

    h = build

    def fragment(self, props: Mapping[str, Any] | None = None) -> Element:
        """Transparent wrapper whose children are the fragment's node children."""
        wrapper = self.element("div")
        kids = (props or {}).get("children")
        if kids is None:
            return wrapper
        if not isinstance(kids, (list, tuple)):
            kids = [kids]
        for child in _flatten_children(kids):
            if isinstance(child, (Element, Component)):
                wrapper.add_child(child)
        return wrapper

    def render_root(self, fn: Any, key: str | None = None) -> Component:
        """
        Evaluate a top-level component with live-binding placeholders.

        Each declared positional parameter ``p`` is passed as ``"$p"`` so the
        DOM-instruction emitter can thread it through as a raw reference.

        Raises:
            BuildError: if ``fn`` is not callable or returns something other
                than an Element or Component.
        """
        if not callable(fn):
            raise make_build_error("Component entry is not callable", component=repr(fn))

        name = key or _callable_name(fn)
        parameters = component_parameters(fn)
        placeholders = [f"{self.sigil}{p}" for p in parameters]

        with self.activate():
            result = fn(*placeholders)

        match result:
            case Component():
                component = Component(result.get_root(), name, parameters)
                for hook in result.get_on_load_hooks():
                    component.add_on_load_hook(hook)
            case Element():
                component = Component(result, name, parameters)
            case _:
                raise make_build_error(
                    f"Expected an Element or Component, got {type(result).__name__}",
                    component=name,
                )

        self._apply_on_load(fn, component)
        self._claim_inline_hooks(component)
        logger.debug("Rendered root %s with parameters %s", name, parameters)
        return component

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _is_fragment(self, type_: Any) -> bool:
        return type_ is Fragment or type_ == self.fragment

    def _merge_children(self, props: Mapping[str, Any] | None, children: tuple[Any, ...]) -> dict[str, Any]:
        merged = dict(props or {})
        merged.pop("children", None)
        if len(children) == 1:
            merged["children"] = children[0]
        elif len(children) > 1:
            merged["children"] = list(children)
        return merged

    def _build_component(
        self, fn: Callable[..., Any], props: Mapping[str, Any] | None, children: tuple[Any, ...]
    ) -> Node:
        name = _callable_name(fn)
        result = fn(self._merge_children(props, children))

        if name.endswith(INLINE_SUFFIX):
            match result:
                case Component():
                    self._apply_on_load(fn, result)
                    return result
                case Element():
                    hooks = list(getattr(fn, ON_LOAD_ATTR, ()))
                    if hooks:
                        # Claimed by the component whose boundary ends up containing it
                        self._inline_hooks.append((result, hooks))
                    return result
            raise make_build_error(
                f"Inline component returned {type(result).__name__}", component=name
            )

        match result:
            case Component():
                component = result
            case Element():
                component = Component(result, name, bound_names(result, self.sigil))
            case _:
                raise make_build_error(
                    f"Expected an Element or Component, got {type(result).__name__}",
                    component=name,
                )
        self._apply_on_load(fn, component)
        self._claim_inline_hooks(component)
        return component

    def _apply_on_load(self, fn: Callable[..., Any], component: Component) -> None:
        for hook in getattr(fn, ON_LOAD_ATTR, ()):
            component.add_on_load_hook(hook)

    def _claim_inline_hooks(self, component: Component) -> None:
        """Move hooks of inline callables spliced into this boundary onto ``component``."""
        if not self._inline_hooks:
            return
        owned: list[Element] = []
        stack = [component.get_root()]
        while stack:
            element = stack.pop()
            owned.append(element)
            stack.extend(child for child in element.children if isinstance(child, Element))

        remaining = []
        for element, hooks in self._inline_hooks:
            if any(element is candidate for candidate in owned):
                for hook in hooks:
                    component.add_on_load_hook(hook)
            else:
                remaining.append((element, hooks))
        self._inline_hooks = remaining

    def _build_element(self, tag: str, props: Mapping[str, Any], children: tuple[Any, ...]) -> Element:
        el = self.element(tag)

        handler = coerce_handler(props.get("onClick"))
        if handler is not None:
            el.set_on_click(handler)

        for raw_name, value in props.items():
            if raw_name in ("onClick", "children"):
                continue
            name = raw_name.rstrip("_") or raw_name
            if name == "style" and isinstance(value, Mapping):
                el.set_attribute("style", style_text(value))
            elif not isinstance(value, (str, int, float, bool)):
                logger.debug("Dropping non-scalar prop %s on <%s>", raw_name, tag)
            else:
                el.set_attribute(name, _stringify(value))

        for child in _flatten_children(self._effective_children(props, children)):
            self._append_child(el, child)

        if el.text is not None and el.children:
            logger.warning(
                "<%s> (%s) has both children and text; text is not emitted", tag, el.token
            )
        return el

    def _effective_children(self, props: Mapping[str, Any], children: tuple[Any, ...]) -> list[Any]:
        if children:
            return list(children)
        prop_children = props.get("children")
        if prop_children is None:
            return []
        if isinstance(prop_children, (list, tuple)):
            return list(prop_children)
        return [prop_children]

    def _append_child(self, el: Element, child: Any) -> None:
        if isinstance(child, (Element, Component)):
            el.add_child(child)
        elif child is None or isinstance(child, bool):
            return
        elif _is_scalar(child):
            text = str(child)
            if self.scalar_policy is ScalarChildPolicy.CONCAT and el.text is not None:
                text = el.text + text
            el.set_text(text)
        else:
            logger.debug("Dropping unsupported child %r under <%s>", child, el.tag)


_default_builder = TreeBuilder()
_active_builder: ContextVar[TreeBuilder | None] = ContextVar("domforge_builder", default=None)


def current_builder() -> TreeBuilder:
    """Return the active builder, falling back to the process default."""
    return _active_builder.get() or _default_builder


def h(type_: str | Callable[..., Any], props: Mapping[str, Any] | None = None, *children: Any) -> Node:
    """JSX-style factory delegating to the active builder."""
    return current_builder().build(type_, props, *children)


def Fragment(props: Mapping[str, Any] | None = None) -> Element:
    """Transparent wrapper; never a component boundary."""
    return current_builder().fragment(props)
