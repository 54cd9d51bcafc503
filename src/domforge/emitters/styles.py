"""
Style flattener - lowers nested style rules to flat CSS text.

Rule mappings nest selectors the way CSS preprocessors do:

    {
        ".card": {
            "padding": "4px",
            ":hover": {"color": "blue"},       # .card:hover
            "&.active": {"color": "red"},      # .card.active
            "h2": {"fontSize": "1.2rem"},      # .card h2
        }
    }

Blocks are emitted parent first, then nested blocks in key order. A block
with no scalar properties of its own is not emitted, but its nested
blocks still are.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domforge.core.builder import to_css_property


def nest_selector(parent: str, key: str) -> str:
    """Combine a parent selector with a nested key."""
    if key.startswith(":"):
        return f"{parent}{key}"
    if key.startswith("&"):
        return key.replace("&", parent)
    return f"{parent} {key}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten_blocks(selector: str, rules: Mapping[str, Any]) -> list[str]:
    declarations: list[str] = []
    nested: list[tuple[str, Mapping[str, Any]]] = []

    for key, value in rules.items():
        if isinstance(value, Mapping):
            nested.append((nest_selector(selector, key), value))
        elif value is not None:
            declarations.append(f"{to_css_property(key)}: {_format_value(value)};")

    blocks: list[str] = []
    if declarations:
        blocks.append(f"{selector} {{ {' '.join(declarations)} }}")
    for child_selector, child_rules in nested:
        blocks.extend(_flatten_blocks(child_selector, child_rules))
    return blocks


def flatten(selector: str, rules: Mapping[str, Any]) -> str:
    """Flatten one selector's (possibly nested) rules into CSS text."""
    return "\n".join(_flatten_blocks(selector, rules))


def flatten_stylesheet(sheet: Mapping[str, Mapping[str, Any]]) -> str:
    """Flatten a ``{selector: rules}`` mapping into CSS text."""
    blocks: list[str] = []
    for selector, rules in sheet.items():
        blocks.extend(_flatten_blocks(selector, rules))
    return "\n".join(blocks)
