"""
Page compiler - turns component callables into deployable artifacts.

The first entry is the root component: its markup becomes the static page
body. Every component (roots and nested boundaries found in their trees)
also gets a factory script so the client runtime can mount it later.

Outputs:
    index.html              - page with root markup, runtime and factories
    runtime.js              - client runtime
    components/<key>.js     - one factory per component
    styles.css              - flattened stylesheet (when styles are given)
    <name>.js               - helper scripts listed in page.scripts, copied as is
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domforge.core.builder import TreeBuilder
from domforge.core.errors import BuildError, make_build_error
from domforge.core.handlers import handler_expression
from domforge.core.manifest import BuildConfig
from domforge.core.nodes import Component, Element, IdentityCounter, Node
from domforge.emitters.dom import REGISTRY, compile_element, compile_factory
from domforge.emitters.markup import escape_attr, escape_text, serialize
from domforge.emitters.styles import flatten_stylesheet
from domforge.runtime.context import RuntimeContext
from domforge.runtime.js import get_runtime_js
from domforge.runtime.virtual_dom import VirtualDocument, make_factory

logger = logging.getLogger(__name__)

REGISTRY_INIT = f"{REGISTRY} = {REGISTRY} || {{}};"

# Files write_artifacts generates at the top of the output directory
RESERVED_NAMES = frozenset({"index.html", "runtime.js", "styles.css"})


class BuildArtifacts(BaseModel):
    """Text artifacts produced by one build."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(description="Key of the root component")
    markup: str = Field(description="Serialized root tree")
    html: str = Field(description="Complete index.html")
    scripts: dict[str, str] = Field(default_factory=dict, description="Factory script per component key")
    runtime_js: str = Field(description="Client runtime script")
    css: str = Field(default="", description="Flattened stylesheet")
    assets: dict[str, str] = Field(
        default_factory=dict, description="Helper scripts by output file name"
    )


def make_builder(config: BuildConfig) -> TreeBuilder:
    return TreeBuilder(
        counter=IdentityCounter(config.token_prefix),
        scalar_policy=config.scalar_children,
        sigil=config.sigil,
    )


# =============================================================================
# Component collection
# =============================================================================


def collect_components(entries: Sequence[Callable[..., Any]], builder: TreeBuilder) -> list[Component]:
    """
    Render every entry and gather all component boundaries.

    Roots come first, in entry order, followed by nested components in
    pre-order. For a key seen more than once the first definition wins.

    Raises:
        BuildError: no entries, a non-callable entry, a bad return value,
            or two entries with the same key.
    """
    if not entries:
        raise BuildError("No root component supplied")

    roots: list[Component] = []
    seen: dict[str, Component] = {}
    for entry in entries:
        component = builder.render_root(entry)
        if component.key in seen:
            raise make_build_error("Duplicate component key", component=component.key)
        seen[component.key] = component
        roots.append(component)

    nested: list[Component] = []
    for root in roots:
        for component in root.walk_components():
            first = seen.get(component.key)
            if first is not None:
                if first is not component and _content(first) != _content(component):
                    logger.warning(
                        "Component %s is used with different content; its factory "
                        "rebuilds the first definition only",
                        component.key,
                    )
                continue
            seen[component.key] = component
            nested.append(component)

    logger.debug("Collected %d root and %d nested components", len(roots), len(nested))
    return roots + nested


def _content(node: Node) -> tuple[Any, ...]:
    """Structural fingerprint of a subtree, ignoring identity tokens."""
    match node:
        case Component():
            return ("component", node.key, tuple(node.parameters), _content(node.get_root()))
        case Element():
            on_click = handler_expression(node.on_click) if node.on_click else None
            children = tuple(
                ("component", child.key) if isinstance(child, Component) else _content(child)
                for child in node.children
            )
            return (node.tag, tuple(node.attributes.items()), node.text, on_click, children)
    raise TypeError(f"Cannot fingerprint {type(node).__name__}")


def load_scripts(paths: Sequence[str]) -> dict[str, str]:
    """
    Read helper scripts to ship next to the page, keyed by output file name.

    Missing files are skipped with a warning.

    Raises:
        BuildError: if two scripts share a file name or one would
            overwrite a generated file
    """
    assets: dict[str, str] = {}
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            logger.warning("Helper script not found: %s", path)
            continue
        if path.name in assets:
            raise BuildError(f"Two helper scripts are named {path.name}")
        if path.name in RESERVED_NAMES:
            raise BuildError(f"Helper script {path} would overwrite the generated {path.name}")
        assets[path.name] = path.read_text(encoding="utf-8")
    return assets


# =============================================================================
# Page assembly
# =============================================================================


def _inline_script(source: str) -> str:
    # Keep string literals from closing the surrounding <script> element
    return "<script>\n" + source.replace("</", "<\\/") + "\n</script>"


def _on_load_script(components: Sequence[Component]) -> str:
    calls = [
        f"  {handler_expression(hook)};"
        for component in components
        for hook in component.get_on_load_hooks()
    ]
    if not calls:
        return ""
    body = "\n".join(calls)
    return f'window.addEventListener("load", function() {{\n{body}\n}});'


def component_script(component: Component, config: BuildConfig) -> str:
    """Standalone script registering one component's factory."""
    return f"{REGISTRY_INIT}\n{compile_factory(component, config.var_prefix, config.sigil)}\n"


def assemble_page(
    components: Sequence[Component],
    markup: str,
    scripts: Mapping[str, str],
    runtime_js: str,
    css: str,
    config: BuildConfig,
    assets: Mapping[str, str] | None = None,
) -> str:
    """Build the index.html text."""
    page = config.page
    head = [
        '<meta charset="UTF-8" />',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0" />',
        f"<title>{escape_text(page.title)}</title>",
    ]
    if css:
        if page.inline_styles:
            head.append(f"<style>\n{css}\n</style>")
        else:
            head.append('<link rel="stylesheet" href="./styles.css" />')

    body = [markup]
    for name in assets or {}:
        body.append(f'<script src="./{escape_attr(name)}"></script>')
    if page.inline_scripts:
        body.append(_inline_script(runtime_js))
        factories = "\n".join(compile_factory(c, config.var_prefix, config.sigil) for c in components)
        body.append(_inline_script(f"{REGISTRY_INIT}\n{factories}"))
    else:
        body.append('<script src="./runtime.js"></script>')
        base = config.runtime.component_base_url.rstrip("/")
        for key in scripts:
            body.append(f'<script src="{escape_attr(f"{base}/{key}.js")}"></script>')

    on_load = _on_load_script(components)
    if on_load:
        body.append(_inline_script(on_load))

    head_html = "\n".join(f"  {line}" for line in head)
    body_html = "\n".join(body)
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{escape_attr(page.lang)}">\n'
        f"<head>\n{head_html}\n</head>\n"
        f"<body>\n{body_html}\n</body>\n"
        "</html>\n"
    )


def compile_components(
    components: Sequence[Component],
    config: BuildConfig | None = None,
    styles: Mapping[str, Mapping[str, Any]] | None = None,
) -> BuildArtifacts:
    """Lower collected components (root first) into build artifacts."""
    if not components:
        raise BuildError("No root component supplied")
    config = config or BuildConfig()

    root = components[0]
    markup = serialize(root.get_root())
    scripts = {c.key: component_script(c, config) for c in components}
    runtime_js = get_runtime_js(config.runtime.component_base_url)
    css = flatten_stylesheet(styles) if styles else ""
    assets = load_scripts(config.page.scripts)

    html = assemble_page(components, markup, scripts, runtime_js, css, config, assets)
    return BuildArtifacts(
        root=root.key,
        markup=markup,
        html=html,
        scripts=scripts,
        runtime_js=runtime_js,
        css=css,
        assets=assets,
    )


def compile_project(
    entries: Sequence[Callable[..., Any]],
    config: BuildConfig | None = None,
    styles: Mapping[str, Mapping[str, Any]] | None = None,
) -> BuildArtifacts:
    """
    Build artifacts from component callables.

    Args:
        entries: Component callables, root first
        config: Build configuration (defaults when omitted)
        styles: Nested style rules keyed by selector

    Returns:
        BuildArtifacts for the build

    Raises:
        BuildError: if the components cannot be built
    """
    config = config or BuildConfig()
    builder = make_builder(config)
    builder.reset()
    components = collect_components(entries, builder)
    logger.info("Compiling %d component(s), root %s", len(components), components[0].key)
    return compile_components(components, config, styles)


def write_artifacts(artifacts: BuildArtifacts, output_dir: Path) -> list[Path]:
    """Write artifacts below ``output_dir`` and return the written paths."""
    components_dir = output_dir / "components"
    components_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []

    def write(path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")
        written.append(path)
        logger.info("Wrote %s", path)

    write(output_dir / "index.html", artifacts.html)
    write(output_dir / "runtime.js", artifacts.runtime_js)
    if artifacts.css:
        write(output_dir / "styles.css", artifacts.css + "\n")
    for key, script in artifacts.scripts.items():
        write(components_dir / f"{key}.js", script)
    for name, content in artifacts.assets.items():
        write(output_dir / name, content)
    return written


# =============================================================================
# Preview
# =============================================================================


def preview_runtime(
    components: Sequence[Component],
    document: VirtualDocument | None = None,
    config: BuildConfig | None = None,
) -> RuntimeContext:
    """
    Create a RuntimeContext with every component's factory registered.

    Factories execute the same instructions the generated scripts contain,
    against a VirtualDocument.
    """
    config = config or BuildConfig()
    document = document or VirtualDocument()
    runtime = RuntimeContext(document)
    for component in components:
        instructions = compile_element(component.get_root(), config.var_prefix, config.sigil)
        runtime.register(
            component.key,
            make_factory(instructions, component.parameters, document, runtime.registry),
        )
    return runtime
