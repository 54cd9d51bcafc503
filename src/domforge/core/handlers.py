"""
Click-handler descriptors.

A descriptor is a tagged payload describing what a click (or page load)
should do in the browser. Both emitters lower descriptors through
:func:`handler_expression`, so markup and generated scripts call the same code.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

# Runtime entry point invoked by render descriptors
RENDER_FUNCTION = "renderComponent"

ArgValue = str | int | float | bool


# =============================================================================
# Descriptors
# =============================================================================


class RenderHandler(BaseModel):
    """
    Mount a named component under a target element.

    Example:
        RenderHandler(component="Card", target="slot")
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["render"] = "render"
    component: str = Field(min_length=1, description="Component key to mount")
    target: str = Field(min_length=1, description="Id of the element to mount under")


class CallHandler(BaseModel):
    """
    Call a named page function with literal arguments.

    Example:
        CallHandler(name="notify", args={"msg": "hi", "count": 2})
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["call"] = "call"
    name: str = Field(min_length=1, description="Global function name")
    args: dict[str, ArgValue] = Field(
        default_factory=dict, description="Arguments in call order"
    )


HandlerDescriptor = Annotated[RenderHandler | CallHandler, Field(discriminator="kind")]

_descriptor_adapter: TypeAdapter[RenderHandler | CallHandler] = TypeAdapter(HandlerDescriptor)


def coerce_handler(value: Any) -> RenderHandler | CallHandler | None:
    """
    Return a descriptor for ``value`` or None if it is not well-formed.

    Accepts descriptor instances and plain mappings such as
    ``{"kind": "call", "name": "f", "args": {"n": 1}}``.
    """
    if isinstance(value, (RenderHandler, CallHandler)):
        return value
    if not isinstance(value, dict):
        return None
    try:
        return _descriptor_adapter.validate_python(value)
    except PydanticValidationError as e:
        logger.debug("Dropping malformed handler descriptor %r: %s", value, e)
        return None


# =============================================================================
# Lowering
# =============================================================================


def encode_literal(value: ArgValue) -> str:
    """Encode a scalar argument as a JavaScript literal (strings quoted, others raw)."""
    return json.dumps(value)


def handler_expression(handler: RenderHandler | CallHandler) -> str:
    """
    Lower a descriptor to a JavaScript call expression.

    Examples:
        RenderHandler(component="Card", target="slot") -> renderComponent("Card", "slot")
        CallHandler(name="f", args={"n": 1})           -> f(1)
    """
    match handler:
        case RenderHandler(component=component, target=target):
            return f"{RENDER_FUNCTION}({encode_literal(component)}, {encode_literal(target)})"
        case CallHandler(name=name, args=args):
            encoded = ", ".join(encode_literal(v) for v in args.values())
            return f"{name}({encoded})"
    raise TypeError(f"Unknown handler descriptor: {handler!r}")
