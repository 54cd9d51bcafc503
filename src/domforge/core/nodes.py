"""
Node model for domforge trees.

A tree is made of two node kinds:

- Element: one markup tag with attributes, children, optional text, an
  identity token and an optional click-handler descriptor.
- Component: a named boundary owning a root Element. Components are
  emitted as separately loadable factories rather than inlined.

Identity tokens are minted by an IdentityCounter owned by the tree builder.
The token is written into the class attribute by the markup emitter and
into the className assignment by the DOM-instruction emitter, which is what
joins the two artifacts.
"""

from __future__ import annotations

from collections.abc import Iterator

from domforge.core.errors import NotRenderedError, TreeError
from domforge.core.handlers import CallHandler, RenderHandler

DEFAULT_TOKEN_PREFIX = "df-el-"


class IdentityCounter:
    """Monotonic source of identity tokens, scoped to one build."""

    def __init__(self, prefix: str = DEFAULT_TOKEN_PREFIX, start: int = 0):
        self.prefix = prefix
        self._start = start
        self._value = start

    def next_token(self) -> str:
        self._value += 1
        return f"{self.prefix}{self._value}"

    def reset(self) -> None:
        self._value = self._start

    @property
    def issued(self) -> int:
        """Number of tokens issued since the last reset."""
        return self._value - self._start


class Element:
    """A markup tag node."""

    def __init__(self, tag: str, token: str):
        self._tag = tag
        self._token = token
        self._attributes: dict[str, str] = {}
        self._children: list[Node] = []
        self._text: str | None = None
        self._on_click: RenderHandler | CallHandler | None = None
        self._parent: Element | None = None
        self._owner: Component | None = None

    def __repr__(self) -> str:
        return f"Element({self._tag!r}, token={self._token!r})"

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def token(self) -> str:
        return self._token

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self._attributes)

    @property
    def children(self) -> list[Node]:
        return list(self._children)

    @property
    def text(self) -> str | None:
        return self._text

    @property
    def on_click(self) -> RenderHandler | CallHandler | None:
        return self._on_click

    @property
    def parent(self) -> Element | None:
        return self._parent

    @property
    def owner(self) -> Component | None:
        """Component this element is the root of, if any."""
        return self._owner

    def set_attribute(self, name: str, value: str) -> None:
        self._attributes[name] = value

    def set_text(self, value: str) -> None:
        self._text = value

    def set_on_click(self, handler: RenderHandler | CallHandler) -> None:
        self._on_click = handler

    def add_child(self, child: Node) -> None:
        """
        Append a child node.

        Raises:
            TreeError: if the child already has an owner or is an ancestor
                of this element.
        """
        match child:
            case Element():
                if child._parent is not None or child._owner is not None:
                    raise TreeError(f"{child!r} already belongs to another node")
                target = child
            case Component():
                if child._parent is not None:
                    raise TreeError(f"{child!r} is already mounted under {child._parent!r}")
                target = child.get_root()
            case _:
                raise TypeError(f"Cannot add {type(child).__name__} as a child")

        if any(ancestor is target for ancestor in self.ancestors()):
            raise TreeError(f"Adding {child!r} under {self!r} would create a cycle")

        child._parent = self
        self._children.append(child)

    def ancestors(self) -> Iterator[Element]:
        """Yield this element and every element above it, crossing component boundaries."""
        node: Element | None = self
        while node is not None:
            yield node
            if node._parent is not None:
                node = node._parent
            elif node._owner is not None:
                node = node._owner._parent
            else:
                node = None

    def walk(self) -> Iterator[Element]:
        """Yield elements in pre-order, descending into component roots."""
        yield self
        for child in self._children:
            match child:
                case Component():
                    yield from child.get_root().walk()
                case Element():
                    yield from child.walk()

    def class_value(self) -> str:
        """Identity token followed by the user-supplied class, if any."""
        user_class = self._attributes.get("class")
        return f"{self._token} {user_class}" if user_class else self._token


class Component:
    """A named, independently loadable boundary around a root Element."""

    def __init__(self, root: Element, key: str, parameters: list[str] | None = None):
        if root._parent is not None:
            raise TreeError(f"Component root {root!r} is already a child of {root._parent!r}")
        self._root: Element | None = root
        self._key = key
        self._parameters = list(parameters or [])
        self._on_load_hooks: list[RenderHandler | CallHandler] = []
        self._parent: Element | None = None
        root._owner = self

    def __repr__(self) -> str:
        return f"Component({self._key!r})"

    @property
    def key(self) -> str:
        return self._key

    @property
    def parameters(self) -> list[str]:
        return list(self._parameters)

    @property
    def parent(self) -> Element | None:
        return self._parent

    def add_on_load_hook(self, hook: RenderHandler | CallHandler) -> None:
        """Register a descriptor to run once the page has loaded."""
        self._on_load_hooks.append(hook)

    def get_on_load_hooks(self) -> list[RenderHandler | CallHandler]:
        return list(self._on_load_hooks)

    def get_root(self) -> Element:
        if self._root is None:
            raise NotRenderedError(f"Component {self._key} not rendered yet")
        return self._root

    def walk_components(self) -> Iterator[Component]:
        """Yield this component and every nested component boundary, pre-order."""
        yield self
        for element in self.get_root().walk():
            for child in element._children:
                if isinstance(child, Component):
                    yield child


Node = Element | Component
