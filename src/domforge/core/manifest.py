import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

from domforge.core.builder import DEFAULT_SIGIL, ScalarChildPolicy
from domforge.core.errors import ConfigError
from domforge.core.nodes import DEFAULT_TOKEN_PREFIX

MANIFEST_NAME = "domforge.toml"


@dataclass
class PageConfig:
    """Settings for the assembled index.html page."""

    title: str = "Compiled Component"
    lang: str = "en"
    inline_scripts: bool = True  # embed component factories in the page
    inline_styles: bool = False  # <style> block instead of styles.css link
    scripts: list[str] = field(default_factory=list)  # helper .js files shipped with the page


@dataclass
class RuntimeConfig:
    """Settings baked into the shipped client runtime."""

    component_base_url: str = "./components"  # where loadComponent fetches <key>.js


@dataclass
class BuildConfig:
    """Build configuration.

    Example domforge.toml:

        [build]
        output_dir = "dist"
        token_prefix = "app-el-"
        scalar_children = "concat"

        [page]
        title = "My App"
        inline_styles = true
        scripts = ["js/helpers.js"]

        [runtime]
        component_base_url = "/static/components"
    """

    output_dir: str = "output"
    token_prefix: str = DEFAULT_TOKEN_PREFIX
    var_prefix: str = "el"
    sigil: str = DEFAULT_SIGIL
    scalar_children: ScalarChildPolicy = ScalarChildPolicy.LAST_WINS
    page: PageConfig = field(default_factory=PageConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _bool(section: dict, name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{name}.{key} must be true or false, got {value!r}")
    return value


def _string_list(section: dict, name: str, key: str) -> list[str]:
    value = section.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{name}.{key} must be a list of strings")
    return list(value)


def _check_keys(section: dict, cls: type, name: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown key(s) in [{name}]: {', '.join(unknown)}")


def parse_config(data: dict) -> BuildConfig:
    build_data = _section(data, "build")
    page_data = _section(data, "page")
    runtime_data = _section(data, "runtime")

    _check_keys(build_data, BuildConfig, "build")
    _check_keys(page_data, PageConfig, "page")
    _check_keys(runtime_data, RuntimeConfig, "runtime")

    sigil = build_data.get("sigil", DEFAULT_SIGIL)
    if len(sigil) != 1:
        raise ConfigError(f"build.sigil must be a single character, got {sigil!r}")

    try:
        scalar_children = ScalarChildPolicy(build_data.get("scalar_children", "last"))
    except ValueError as e:
        raise ConfigError(
            f"build.scalar_children must be one of: "
            f"{', '.join(p.value for p in ScalarChildPolicy)}"
        ) from e

    page_config = PageConfig(
        title=page_data.get("title", "Compiled Component"),
        lang=page_data.get("lang", "en"),
        inline_scripts=_bool(page_data, "page", "inline_scripts", True),
        inline_styles=_bool(page_data, "page", "inline_styles", False),
        scripts=_string_list(page_data, "page", "scripts"),
    )

    runtime_config = RuntimeConfig(
        component_base_url=runtime_data.get("component_base_url", "./components"),
    )

    return BuildConfig(
        output_dir=build_data.get("output_dir", "output"),
        token_prefix=build_data.get("token_prefix", DEFAULT_TOKEN_PREFIX),
        var_prefix=build_data.get("var_prefix", "el"),
        sigil=sigil,
        scalar_children=scalar_children,
        page=page_config,
        runtime=runtime_config,
    )


def load_config(path: Path) -> BuildConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    return parse_config(data)


def find_config(start: Path) -> BuildConfig:
    """Load domforge.toml from ``start`` if present, otherwise return defaults."""
    candidate = start / MANIFEST_NAME
    if candidate.exists():
        return load_config(candidate)
    return BuildConfig()
