"""Tests for the nested style flattener."""

from domforge.emitters.styles import flatten, flatten_stylesheet, nest_selector


class TestNestSelector:
    def test_pseudo_appends(self) -> None:
        assert nest_selector(".btn", ":hover") == ".btn:hover"

    def test_ampersand_substitutes(self) -> None:
        assert nest_selector(".card", "&.active") == ".card.active"
        assert nest_selector(".card", "& + &") == ".card + .card"

    def test_other_keys_are_descendants(self) -> None:
        assert nest_selector(".nav", "a") == ".nav a"


class TestFlatten:
    """Rule flattening."""

    def test_parent_then_nested(self) -> None:
        sheet = {".card": {"color": "red", "&:hover": {"color": "blue"}}}
        assert flatten_stylesheet(sheet) == ".card { color: red; }\n.card:hover { color: blue; }"

    def test_block_without_scalars_is_suppressed(self) -> None:
        assert flatten(".nav", {"a": {"color": "red"}}) == ".nav a { color: red; }"

    def test_parent_emitted_before_nested_regardless_of_key_order(self) -> None:
        rules = {"b": {"c": 1}, "d": 2}
        assert flatten(".a", rules) == ".a { d: 2; }\n.a b { c: 1; }"

    def test_multiple_declarations(self) -> None:
        rules = {"padding": "4px", "color": "red"}
        assert flatten(".card", rules) == ".card { padding: 4px; color: red; }"

    def test_camel_case_properties(self) -> None:
        assert flatten(".x", {"fontSize": 12}) == ".x { font-size: 12; }"

    def test_deep_nesting(self) -> None:
        rules = {"&.on": {":hover": {"opacity": 0.5}}}
        assert flatten(".a", rules) == ".a.on:hover { opacity: 0.5; }"

    def test_none_values_are_skipped(self) -> None:
        assert flatten(".a", {"color": None}) == ""

    def test_multiple_selectors(self) -> None:
        sheet = {"body": {"margin": 0}, ".app": {"display": "grid"}}
        assert flatten_stylesheet(sheet) == "body { margin: 0; }\n.app { display: grid; }"
