"""Typer CLI for assetfs: embed static files and inspect generated bundles."""

from __future__ import annotations

import datetime as _dt
import logging
import sys
import threading
from pathlib import Path
from typing import NoReturn, Optional

import typer

from assetfs.bundle import AssetBundle, load_bundle
from assetfs.config import load_config
from assetfs.errors import ConfigError

app = typer.Typer(
    help="Embed static web assets in a Python module and serve them as a filesystem.",
    add_completion=False,
)


# ── Helpers ────────────────────────────────────────────────────────


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _load(module: str, root: Optional[Path] = None) -> AssetBundle:
    # generated modules next to the caller should be importable by name
    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))
    try:
        bundle = load_bundle(module)
    except (ImportError, OSError) as e:
        _fail(str(e))
    if root is not None:
        bundle.root = root.resolve()
    return bundle


def _format_time(ts: int) -> str:
    return _dt.datetime.fromtimestamp(ts, tz=_dt.timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── Commands ───────────────────────────────────────────────────────


@app.command()
def embed(
    sources: Optional[list[Path]] = typer.Argument(None, help="Files or directories to embed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Generated module path"),
    strip_prefix: Optional[str] = typer.Option(
        None, "--strip-prefix", help="Prefix removed from local paths to form asset keys"
    ),
    include: Optional[str] = typer.Option(None, "--include", help="Only embed paths matching regex"),
    ignore: Optional[str] = typer.Option(None, "--ignore", help="Skip paths matching regex"),
    modtime: Optional[int] = typer.Option(
        None, "--modtime", help="Unix timestamp recorded for every asset"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="assetfs.toml or pyproject.toml to read defaults from"
    ),
) -> None:
    """Generate a Python module embedding SOURCES."""
    from assetfs.embed import collect, write_module

    try:
        settings = load_config(config).merged(
            sources=[str(s) for s in sources] if sources else None,
            output=str(output) if output else None,
            strip_prefix=strip_prefix,
            include=include,
            ignore=ignore,
            mod_time=modtime,
        )
    except ConfigError as e:
        _fail(str(e))

    if not settings.sources:
        _fail("no sources given (pass paths or set 'sources' in the config)")
    if not settings.output:
        _fail("no output given (pass --output or set 'output' in the config)")

    try:
        records = collect(
            settings.sources,
            strip_prefix=settings.strip_prefix,
            include=settings.include,
            ignore=settings.ignore,
            mod_time=settings.mod_time,
        )
        written = write_module(records, Path(settings.output))
    except OSError as e:
        _fail(str(e))

    typer.echo(f"Wrote {settings.output} ({len(records)} assets, {written:,} bytes)")


@app.command("ls")
def list_assets(
    module: str = typer.Argument(..., help="Generated module (dotted name or .py path)"),
) -> None:
    """List the assets of a bundle."""
    from rich.console import Console
    from rich.table import Table

    bundle = _load(module)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Encoded", justify="right")
    table.add_column("Modified (UTC)")
    table.add_column("Local path", style="dim")

    for path in sorted(bundle.registry):
        record = bundle.registry[path]
        table.add_row(
            path,
            f"{record.size:,} B",
            f"{len(record.payload):,} B",
            _format_time(record.mod_time),
            record.local_path,
        )

    console = Console()
    console.print(table)
    console.print(f"{len(bundle.registry)} assets")


@app.command()
def cat(
    module: str = typer.Argument(..., help="Generated module (dotted name or .py path)"),
    path: str = typer.Argument(..., help="Asset path, e.g. /js/main.js"),
    local: bool = typer.Option(False, "--local", help="Read the original file from disk"),
    root: Optional[Path] = typer.Option(None, "--root", help="Base directory for --local"),
) -> None:
    """Write an asset's content to stdout."""
    bundle = _load(module, root)
    try:
        data = bundle.get_bytes(local, path)
    except OSError as e:
        _fail(str(e))
    typer.echo(data, nl=False)


@app.command()
def verify(
    module: str = typer.Argument(..., help="Generated module (dotted name or .py path)"),
    local: bool = typer.Option(False, "--local", help="Also compare with the files on disk"),
    root: Optional[Path] = typer.Option(None, "--root", help="Base directory for --local"),
) -> None:
    """Decode every asset and check its recorded size (CI gate)."""
    bundle = _load(module, root)

    failed = False
    for path in sorted(bundle.registry):
        record = bundle.registry[path]
        try:
            data = record.materialize()
        except OSError as e:
            typer.secho(f"FAIL: {path} {e}", fg=typer.colors.RED)
            failed = True
            continue

        if local:
            try:
                on_disk = bundle.get_bytes(True, path)
            except OSError as e:
                typer.secho(f"FAIL: {path} {e}", fg=typer.colors.RED)
                failed = True
                continue
            if on_disk != data:
                typer.secho(f"FAIL: {path} differs from {record.local_path}", fg=typer.colors.RED)
                failed = True
                continue

        typer.secho(f"PASS: {path} ({record.size} bytes)", fg=typer.colors.GREEN)

    if failed:
        raise typer.Exit(1)


@app.command()
def serve(
    module: str = typer.Argument(..., help="Generated module (dotted name or .py path)"),
    port: int = typer.Option(8001, help="Port to serve on"),
    local: bool = typer.Option(False, "--local", help="Serve the original files from disk"),
    root: Optional[Path] = typer.Option(None, "--root", help="Base directory for --local"),
    prefix: str = typer.Option("", "--prefix", help="Asset path prefix to mount at /"),
    no_open: bool = typer.Option(False, "--no-open", help="Don't open browser automatically"),
    cors: bool = typer.Option(False, "--cors", help="Enable CORS headers for cross-origin access"),
) -> None:
    """Serve a bundle over HTTP for previewing."""
    from assetfs.server import make_app, open_browser

    bundle = _load(module, root)
    fs = bundle.dir_filesystem(local, prefix) if prefix else bundle.filesystem(local)
    url = f"http://127.0.0.1:{port}"

    typer.echo(f"Serving {len(bundle.registry)} assets at {url}")
    typer.echo(f"  Mode: {'local' if local else 'embedded'}")
    if prefix:
        typer.echo(f"  Prefix: {prefix}")
    if cors:
        typer.echo("  CORS: enabled")
    typer.echo("  Stop: Ctrl+C")

    if not no_open:
        threading.Timer(0.5, open_browser, args=(url,)).start()

    make_app(fs, cors=cors).run(host="127.0.0.1", port=port, quiet=True, server="wsgiref")


def main() -> None:
    app()
