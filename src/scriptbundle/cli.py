"""
scriptbundle command line.

Renders the bundles declared in a ``scriptbundle.toml`` manifest, e.g. as a
deploy step that publishes release bundles ahead of the first request.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ._version import get_version
from .cache import BundleCache, DebugRenderCache
from .config import MANIFEST_FILE, BundleManifest, load_manifest
from .errors import BundleError
from .logging import setup_logging
from .minifiers import JavaScriptMinifier, default_registry, minifier_identifier

app = typer.Typer(
    help="Bundle, minify and cache-bust JavaScript assets",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scriptbundle {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
    log_dir: Annotated[
        Path | None, typer.Option("--log-dir", help="Also write a JSONL log to this directory")
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """Bundle, minify and cache-bust JavaScript assets."""
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING, log_dir=log_dir)


def _load(manifest: Path) -> BundleManifest:
    try:
        return load_manifest(manifest)
    except BundleError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e


ManifestOption = Annotated[
    Path, typer.Option("--manifest", "-m", help="Path to scriptbundle.toml")
]


@app.command()
def render(
    manifest: ManifestOption = Path(MANIFEST_FILE),
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Render only this bundle")
    ] = None,
    debug: Annotated[
        bool | None,
        typer.Option("--debug/--release", help="Override the manifest's debug setting"),
    ] = None,
) -> None:
    """Render bundles and print their script tags."""
    loaded = _load(manifest)
    cache, debug_cache = BundleCache(), DebugRenderCache()

    try:
        specs = [loaded.get(name)] if name else loaded.bundles
        for spec in specs:
            bundle = loaded.build(spec, debug=debug, cache=cache, debug_cache=debug_cache)
            typer.echo(bundle.as_named(spec.name, spec.output))
    except BundleError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def build(manifest: ManifestOption = Path(MANIFEST_FILE)) -> None:
    """Release-render every bundle, writing minified outputs."""
    loaded = _load(manifest)
    cache = BundleCache()

    table = Table(title="Bundles")
    table.add_column("Name", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Markup")

    try:
        for spec in loaded.bundles:
            bundle = loaded.build(spec, debug=False, cache=cache, debug_cache=DebugRenderCache())
            markup = bundle.as_named(spec.name, spec.output)
            table.add_row(spec.name, str(len(cache.get_files(spec.name))), markup)
    except BundleError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(table)
    console.print(f"[green]✓[/green] Built {len(loaded.bundles)} bundle(s)")


@app.command()
def minifiers() -> None:
    """List minifier choices and the compressors they select."""
    registry = default_registry()

    table = Table(title="Minifiers")
    table.add_column("Choice", style="cyan")
    table.add_column("Compressor")
    for choice in JavaScriptMinifier:
        table.add_row(choice.value, minifier_identifier(choice))
    console.print(table)
    console.print(f"Registered: {', '.join(registry.identifiers())}")


def main() -> None:
    app()
