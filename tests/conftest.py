"""Shared pytest fixtures for domforge tests."""

import pytest

from domforge.core.builder import TreeBuilder
from domforge.core.handlers import CallHandler
from domforge.core.nodes import Element
from domforge.runtime.virtual_dom import VirtualDocument


@pytest.fixture
def builder() -> TreeBuilder:
    """Return a fresh builder with its own token counter."""
    return TreeBuilder()


@pytest.fixture
def document() -> VirtualDocument:
    """Return an empty virtual document."""
    return VirtualDocument()


@pytest.fixture
def app_tree(builder: TreeBuilder) -> Element:
    """div.app > (h1 "Hi", button[onclick=f(1)])"""
    return builder.h(
        "div",
        {"class": "app"},
        builder.h("h1", None, "Hi"),
        builder.h("button", {"onClick": CallHandler(name="f", args={"n": 1})}),
    )
