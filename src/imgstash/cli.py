"""Click CLI for imgstash — upload images and fetch them back by key."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imgstash.config.hierarchy import load_config_hierarchy
from imgstash.errors.exceptions import DecodeError, StoreError

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level, falling back to config."""
    configured = str(load_config_hierarchy()["log_level"]).upper()
    level = logging.getLevelNamesMapping().get(configured, logging.WARNING)
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="imgstash")
def cli() -> None:
    """imgstash — share an image by key until it expires."""


@cli.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="SQLite database path.")
@click.option("--ttl", "ttl_seconds", type=float, default=None, help="Lifetime in seconds.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def upload(image_path: str, db_path: str | None, ttl_seconds: float | None, verbose: int) -> None:
    """Store an image and print its key."""
    _setup_logging(verbose)
    from imgstash.core import ImageStash

    try:
        with ImageStash(db_path=db_path, ttl_seconds=ttl_seconds) as stash:
            key = stash.upload_file(image_path)
    except (DecodeError, StoreError, ValueError) as e:
        logger.info("Upload failed: %s", e)
        error_console.print("[red]Error:[/red] Failed to store the image.")
        sys.exit(1)

    click.echo(key)


@cli.command()
@click.argument("key")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write image to file.")
@click.option("--base64", "as_base64", is_flag=True, default=False, help="Print as base64.")
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="SQLite database path.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def fetch(
    key: str,
    output: str | None,
    as_base64: bool,
    db_path: str | None,
    verbose: int,
) -> None:
    """Fetch a live image by key."""
    _setup_logging(verbose)
    from imgstash.core import ImageStash

    record = None
    try:
        with ImageStash(db_path=db_path) as stash:
            record = stash.retrieve(key).record
    except StoreError as e:
        # An unopenable store reads the same as a miss
        logger.info("Store unavailable: %s", e)

    if record is None:
        error_console.print(f"[yellow]Not found:[/yellow] {key}")
        sys.exit(1)

    if output:
        Path(output).write_bytes(record.payload)
        console.print(f"[green]Written to {output}[/green]")
    elif as_base64:
        click.echo(record.to_renderable_string())
    else:
        click.get_binary_stream("stdout").write(record.payload)


@cli.command("config")
def show_config() -> None:
    """Show the resolved configuration."""
    config = load_config_hierarchy()

    table = Table(title="Configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key in sorted(config):
        table.add_row(key, str(config[key]))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()
