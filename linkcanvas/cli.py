"""CLI entrypoint for linkcanvas."""

import logging
import os
import sys
from pathlib import Path

import click

from . import __version__
from .config import load_settings
from .errors import ConfigError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _auto_detect_vault(start: Path) -> Path | None:
    """Find the vault root (a folder holding .obsidian, or ./content) by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / ".obsidian").is_dir():
            return p
        if p.is_dir() and p.name.lower() == "content":
            return p
        candidate = p / "content"
        if candidate.is_dir():
            return candidate
    return None


def _configure_logging(level: str | None) -> None:
    level = (level or os.getenv("LINKCANVAS_LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _canvas_path(canvas: Path) -> Path:
    """Canvas paths are taken relative to the working directory if they exist there, else to the vault."""
    return canvas.resolve() if canvas.exists() else canvas


@click.group()
@click.version_option(__version__, prog_name="linkcanvas")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to vault root (defaults to auto-detected vault)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (defaults to <vault>/.linkcanvas.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (defaults to $LINKCANVAS_LOG_LEVEL or WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, config_path: Path | None, log_level: str | None) -> None:
    """linkcanvas - link-neighborhood canvases for markdown vaults.

    Generate a canvas around a note and grow it one level of links at a time.
    """
    _configure_logging(log_level)

    ctx.ensure_object(dict)
    if vault is None:
        detected = _auto_detect_vault(Path.cwd())
        if detected is None:
            raise click.ClickException("Vault not found. Pass --vault /path/to/vault or run from inside it.")
        vault = detected

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    try:
        settings = load_settings(vault, config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["vault"] = vault.resolve()
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("note")
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Link depth (overrides settings)")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Canvas path (defaults to <note>_canvas.canvas next to the note)",
)
@click.pass_context
def generate(ctx: click.Context, note: str, depth: int | None, out: Path | None) -> None:
    """Generate a canvas of a note's links and backlinks.

    Examples:

        linkcanvas generate "Project Alpha"

        linkcanvas generate notes/alpha.md --depth 2
    """
    from .commands.generate import run_generate

    settings = ctx.obj["settings"].with_overrides(link_depth=depth)
    out = out.resolve() if out is not None else None
    sys.exit(run_generate(ctx.obj["vault"], note, settings=settings, out=out))


@cli.command()
@click.argument("canvas", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--direction",
    type=click.Choice(["left", "right", "both"]),
    default="both",
    show_default=True,
    help="left = add backlinks, right = add forward links",
)
@click.option("--from", "focus", type=str, default=None, metavar="NOTE", help="Only expand from this note")
@click.pass_context
def expand(ctx: click.Context, canvas: Path, direction: str, focus: str | None) -> None:
    """Grow an existing canvas by one level of links.

    Nodes already on the canvas keep their positions; new notes are slotted
    into the neighbouring column without overlapping it.
    """
    from .commands.expand import run_expand

    exit_code = run_expand(
        ctx.obj["vault"],
        _canvas_path(canvas),
        settings=ctx.obj["settings"],
        direction=direction,
        focus=focus,
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("canvas", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "md", "json"]),
    default="rich",
    show_default=True,
    help="Output format",
)
@click.pass_context
def show(ctx: click.Context, canvas: Path, fmt: str) -> None:
    """Summarize a canvas: focus note, counts and columns."""
    from .commands.show import run_show

    sys.exit(run_show(ctx.obj["vault"], _canvas_path(canvas), fmt=fmt))


@cli.command()
@click.argument("note")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json"]),
    default="rich",
    show_default=True,
    help="Output format",
)
@click.pass_context
def links(ctx: click.Context, note: str, fmt: str) -> None:
    """List the resolved forward links and backlinks of a note."""
    from .commands.links import run_links

    sys.exit(run_links(ctx.obj["vault"], note, fmt=fmt))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
