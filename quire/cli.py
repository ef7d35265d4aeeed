"""Command-line interface for Quire.

This module defines the CLI commands using the Click framework.

Commands:
- compile: Build a project into its output directory.
- clean: Remove a project's output directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__
from .errors import QuireError

ENV_VAR = "QUIRE_ENV"


@click.group()
@click.version_option(version=__version__, prog_name="quire")
@click.option("--verbose", "-v", is_flag=True, help="Log every step of the build")
def cli(verbose: bool):
    """Quire static site generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(heading: str, exc: QuireError, project_root: Path) -> None:
    """Print a QuireError in colour and exit with status 1."""
    click.echo(click.style(heading, fg="red", bold=True), err=True)
    if exc.path is not None:
        try:
            shown = Path(exc.path).relative_to(project_root)
        except ValueError:
            shown = exc.path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
    raise SystemExit(1)


@cli.command(name="compile")
@click.argument("directory", type=click.Path(path_type=Path))
@click.option(
    "--env",
    "environment",
    envvar=ENV_VAR,
    help=f'"production" or "development" (defaults to ${ENV_VAR})',
)
def compile_command(directory: Path, environment: str | None):
    """Compile the project at DIRECTORY."""
    from .build import compile_project

    try:
        result = compile_project(directory, environment)
    except QuireError as exc:
        _fail("Build failed:", exc, directory)
    click.echo(f'The project at "{directory}" has been compiled.')
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command()
@click.argument("directory", type=click.Path(path_type=Path))
def clean(directory: Path):
    """Remove the output directory of the project at DIRECTORY."""
    from .build import clean_project

    try:
        removed = clean_project(directory)
    except QuireError as exc:
        _fail("Clean failed:", exc, directory)
    if removed:
        click.echo(f'The project at "{directory}" has been cleaned.')
    else:
        click.echo(f'The project at "{directory}" had nothing to clean.')


def main():
    """Entry point for the CLI application."""
    cli()
