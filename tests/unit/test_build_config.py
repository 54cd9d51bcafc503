"""Tests for domforge.toml loading."""

from pathlib import Path

import pytest

from domforge.core.builder import ScalarChildPolicy
from domforge.core.errors import ConfigError
from domforge.core.manifest import (
    MANIFEST_NAME,
    BuildConfig,
    find_config,
    load_config,
    parse_config,
)


class TestParseConfig:
    def test_defaults(self) -> None:
        config = parse_config({})
        assert config == BuildConfig()
        assert config.token_prefix == "df-el-"
        assert config.scalar_children is ScalarChildPolicy.LAST_WINS
        assert config.page.inline_scripts is True
        assert config.runtime.component_base_url == "./components"

    def test_all_sections(self) -> None:
        config = parse_config(
            {
                "build": {"output_dir": "dist", "sigil": "@", "scalar_children": "concat"},
                "page": {"title": "Demo", "inline_styles": True},
                "runtime": {"component_base_url": "/static/c"},
            }
        )
        assert config.output_dir == "dist"
        assert config.sigil == "@"
        assert config.scalar_children is ScalarChildPolicy.CONCAT
        assert config.page.title == "Demo"
        assert config.page.inline_styles is True
        assert config.runtime.component_base_url == "/static/c"

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown key"):
            parse_config({"page": {"titel": "typo"}})

    def test_section_must_be_table(self) -> None:
        with pytest.raises(ConfigError, match=r"\[build\] must be a table"):
            parse_config({"build": "dist"})

    def test_sigil_must_be_single_character(self) -> None:
        with pytest.raises(ConfigError, match="sigil"):
            parse_config({"build": {"sigil": "$$"}})

    def test_bad_scalar_policy(self) -> None:
        with pytest.raises(ConfigError, match="scalar_children"):
            parse_config({"build": {"scalar_children": "first"}})

    def test_page_flags_must_be_booleans(self) -> None:
        with pytest.raises(ConfigError, match="page.inline_scripts must be true or false"):
            parse_config({"page": {"inline_scripts": "no"}})
        with pytest.raises(ConfigError, match="page.inline_styles"):
            parse_config({"page": {"inline_styles": 1}})

    def test_page_scripts(self) -> None:
        config = parse_config({"page": {"scripts": ["js/helpers.js"]}})
        assert config.page.scripts == ["js/helpers.js"]
        with pytest.raises(ConfigError, match="page.scripts"):
            parse_config({"page": {"scripts": "js/helpers.js"}})


class TestLoadConfig:
    """Reading domforge.toml from disk."""

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / MANIFEST_NAME
        path.write_text('[build]\ntoken_prefix = "app-"\n\n[page]\nlang = "de"\n')
        config = load_config(path)
        assert config.token_prefix == "app-"
        assert config.page.lang == "de"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / MANIFEST_NAME
        path.write_text("[build\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_find_config_without_file(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) == BuildConfig()

    def test_find_config_with_file(self, tmp_path: Path) -> None:
        (tmp_path / MANIFEST_NAME).write_text('[build]\noutput_dir = "site"\n')
        assert find_config(tmp_path).output_dir == "site"
