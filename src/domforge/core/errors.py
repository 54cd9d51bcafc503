"""
Error types for domforge tree building and compilation.
"""

from dataclasses import dataclass
from typing import Optional


class DomForgeError(Exception):
    """Base exception for all domforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class BuildError(DomForgeError):
    """
    Raised when a build cannot produce its artifacts.

    Examples:
    - No root component was supplied
    - A component entry is not callable
    - A component returned something other than an Element or Component
    - Two components share the same key
    """

    pass


class TreeError(DomForgeError):
    """
    Raised when a mutation would break the tree shape.

    Examples:
    - Adding a node that already has a parent
    - Adding an ancestor as a child (cycle)
    """

    pass


class NotRenderedError(DomForgeError):
    """Raised when a Component's root is requested before it exists."""

    pass


class ConfigError(DomForgeError):
    """
    Raised when domforge.toml cannot be read or holds invalid values.
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        component: Component key (or callable name) being processed
        source: Optional "module:attr" reference the component came from
    """

    component: str
    source: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "component Card (from app.views:Card)"
        """
        location = f"component {self.component}"
        if self.source:
            location += f" (from {self.source})"
        return location


def make_build_error(
    message: str,
    component: str | None = None,
    source: str | None = None,
) -> BuildError:
    """
    Helper to create a BuildError with optional context.

    Args:
        message: Error description
        component: Optional component key or callable name
        source: Optional import reference

    Returns:
        BuildError with context if a component was named
    """
    if component:
        return BuildError(message, ErrorContext(component=component, source=source))
    return BuildError(message)
