"""
domforge CLI.

Commands:
- build: Compile component callables to index.html + component scripts
- css:   Flatten a nested style-rule file to CSS
- runtime: Print the client runtime script
"""

from __future__ import annotations

import importlib
import json
import logging
import os
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from domforge._version import get_version
from domforge.compiler import compile_project, write_artifacts
from domforge.core.errors import DomForgeError
from domforge.core.manifest import find_config, load_config
from domforge.emitters.styles import flatten_stylesheet
from domforge.runtime.js import get_runtime_js

# Module-level mapping picked up from each referenced module
STYLES_ATTR = "STYLES"

app = typer.Typer(
    help="domforge - compile component trees to static HTML and DOM factories",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"domforge version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """domforge CLI main callback for global options."""
    log_level = "DEBUG" if verbose else os.getenv("DOMFORGE_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def resolve_reference(reference: str) -> tuple[ModuleType, Callable[..., Any]]:
    """Resolve ``package.module:attr`` to the module and the attribute."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        typer.echo(f"Invalid component reference '{reference}' (expected module:attr)", err=True)
        raise typer.Exit(code=1)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.echo(f"Cannot import {module_name}: {e}", err=True)
        raise typer.Exit(code=1) from e

    if not hasattr(module, attr):
        typer.echo(f"Module {module_name} has no attribute '{attr}'", err=True)
        raise typer.Exit(code=1)
    return module, getattr(module, attr)


def _collect_styles(modules: list[ModuleType]) -> dict[str, Any]:
    styles: dict[str, Any] = {}
    seen: set[str] = set()
    for module in modules:
        if module.__name__ in seen:
            continue
        seen.add(module.__name__)
        sheet = getattr(module, STYLES_ATTR, None)
        if isinstance(sheet, dict):
            styles.update(sheet)
    return styles


@app.command("build")
def build_command(
    components: list[str] = typer.Argument(
        ..., help="Component references (module:attr); the first is the root"
    ),
    output_dir: str | None = typer.Option(None, "--output", "-o", help="Output directory"),
    config_path: str | None = typer.Option(
        None, "--config", "-c", help="Path to domforge.toml (default: ./domforge.toml)"
    ),
    scripts: list[str] = typer.Option(
        [], "--script", "-s", help="Helper script to ship with the page (repeatable)"
    ),
) -> None:
    """
    Compile components to index.html, runtime.js and one script per component.

    Module-level STYLES mappings in the referenced modules are flattened
    into styles.css. Helper scripts (page.scripts plus --script) are copied
    to the output directory and loaded before the runtime.
    """
    try:
        config = load_config(Path(config_path)) if config_path else find_config(Path.cwd())
    except (DomForgeError, OSError) as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=1) from e
    config.page.scripts = [*config.page.scripts, *scripts]

    # Authored component modules live in the project, not the installed package
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    resolved = [resolve_reference(ref) for ref in components]
    entries = [fn for _, fn in resolved]
    styles = _collect_styles([module for module, _ in resolved])

    try:
        artifacts = compile_project(entries, config, styles or None)
    except DomForgeError as e:
        typer.echo(f"Build failed: {e}", err=True)
        raise typer.Exit(code=1) from e

    out = Path(output_dir or config.output_dir)
    written = write_artifacts(artifacts, out)

    table = Table(title=f"Build output ({artifacts.root})")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for path in written:
        table.add_row(str(path), f"{path.stat().st_size} B")
    console.print(table)
    console.print(f"[green]Compiled {len(artifacts.scripts)} component(s) to {out.resolve()}[/green]")


@app.command("css")
def css_command(
    path: str = typer.Argument(..., help="JSON or TOML file mapping selectors to nested rules"),
) -> None:
    """Flatten a nested style-rule file and print the CSS."""
    source = Path(path)
    if not source.exists():
        typer.echo(f"File not found: {source}", err=True)
        raise typer.Exit(code=1)

    text = source.read_text(encoding="utf-8")
    try:
        sheet = tomllib.loads(text) if source.suffix == ".toml" else json.loads(text)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        typer.echo(f"Cannot parse {source}: {e}", err=True)
        raise typer.Exit(code=1) from e

    if not isinstance(sheet, dict):
        typer.echo("Style file must contain a mapping of selectors to rules", err=True)
        raise typer.Exit(code=1)
    typer.echo(flatten_stylesheet(sheet))


@app.command("runtime")
def runtime_command(
    component_base_url: str = typer.Option(
        "./components", "--base-url", help="URL prefix loadComponent fetches scripts from"
    ),
) -> None:
    """Print the client runtime script."""
    typer.echo(get_runtime_js(component_base_url))


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
