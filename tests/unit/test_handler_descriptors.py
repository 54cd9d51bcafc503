"""Tests for click-handler descriptors and their lowering."""

from domforge.core.handlers import CallHandler, RenderHandler, coerce_handler, handler_expression


class TestHandlerExpression:
    """Descriptor -> JavaScript call expression."""

    def test_render_descriptor(self) -> None:
        handler = RenderHandler(component="Card1", target="slot")
        assert handler_expression(handler) == 'renderComponent("Card1", "slot")'

    def test_call_descriptor_encodes_literals(self) -> None:
        handler = CallHandler(name="notify", args={"msg": "Hello", "count": 42, "ok": True})
        assert handler_expression(handler) == 'notify("Hello", 42, true)'

    def test_call_without_args(self) -> None:
        assert handler_expression(CallHandler(name="reload")) == "reload()"


class TestCoerceHandler:
    """Validating descriptors supplied as props."""

    def test_instance_passes_through(self) -> None:
        handler = CallHandler(name="f")
        assert coerce_handler(handler) is handler

    def test_mapping_is_validated(self) -> None:
        handler = coerce_handler({"kind": "render", "component": "Card", "target": "slot"})
        assert handler == RenderHandler(component="Card", target="slot")

    def test_call_mapping(self) -> None:
        handler = coerce_handler({"kind": "call", "name": "f", "args": {"n": 1}})
        assert isinstance(handler, CallHandler)
        assert handler.args == {"n": 1}

    def test_malformed_mapping_is_dropped(self) -> None:
        assert coerce_handler({"kind": "render", "component": "Card"}) is None
        assert coerce_handler({"kind": "teleport"}) is None
        assert coerce_handler({"kind": "call", "name": ""}) is None

    def test_non_mapping_is_dropped(self) -> None:
        assert coerce_handler(lambda: None) is None
        assert coerce_handler("f()") is None
        assert coerce_handler(None) is None
