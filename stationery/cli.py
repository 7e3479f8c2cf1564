"""Command-line interface for Stationery.

This module defines the CLI commands using Click framework.

Commands:
- build: Build the site into the output directory.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="stationery")
def cli():
    """Stationery static site generator."""


@cli.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (defaults to .station.yml)",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write the site here instead of the configured output directory",
)
@click.option("--clean", is_flag=True, help="Empty the output directory first")
def build(config_file: Path | None, output: Path | None, clean: bool):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site
    from .config import ConfigError, load_config

    try:
        try:
            config = load_config(project_root, config_file)
        except ConfigError as exc:
            raise BuildError(exc.path, exc.message, exc) from exc
        build_site(
            project_root,
            config=config,
            clean_output=clean,
            output_dir_override=output.resolve() if output else None,
        )
    except BuildError as exc:
        source = exc.source_path
        if source.is_absolute() and source.is_relative_to(project_root):
            source = source.relative_to(project_root)
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {source}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo("Done!")


def main():
    """Entry point for the CLI application."""
    cli()
