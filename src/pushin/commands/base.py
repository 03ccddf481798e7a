"""Shared CLI utilities."""

import logging
from pathlib import Path

import click

from ..config import PushinSettings
from ..data import DEFAULT_CATALOG, load_catalog
from ..errors import PushinError
from ..models.target import BlockTarget


def configure_logging(verbose: int) -> None:
    """Route pushin logs to stderr at a level chosen by -v flags."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_settings(lenient_time: bool = False, **overrides) -> PushinSettings:
    """Environment settings with command-line overrides applied."""
    try:
        return PushinSettings().with_overrides(
            strict_time=False if lenient_time else None,
            **overrides,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def get_catalog(ctx: click.Context, catalog_path: Path | None) -> list[BlockTarget]:
    """Load the catalog file, or fall back to the default catalog."""
    if catalog_path is None:
        return list(DEFAULT_CATALOG)

    try:
        return load_catalog(catalog_path)
    except (FileNotFoundError, PushinError) as e:
        echo_error(str(e))
        ctx.exit(1)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_duration(seconds: int) -> str:
    """Format seconds as M:SS (or H:MM:SS past an hour)."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []
    lines.append("".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)))
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(lines)
