"""CLI entry point: depclean.

Subcommands:
    depclean clean plug jason         # Delete build artifacts + sources of two deps
    depclean clean --all --build      # Delete every dep's build artifacts, keep sources
    depclean clean --unused --unlock  # Delete deps no longer in project.toml, unlock them
    depclean unlock --unused          # Drop stale lock file entries
"""

from __future__ import annotations

import os
import sys
from typing import NoReturn

import click

from depclean.cleaner import clean_deps, unlock_deps
from depclean.core.logging import setup_logging
from depclean.exceptions import DepCleanError
from depclean.models import Scope
from depclean.policy import Selection
from depclean.project import DEFAULT_MANIFEST, load_project

_DEFAULT_MANIFEST = os.environ.get("DEPCLEAN_MANIFEST", DEFAULT_MANIFEST)

_UNLOCK_USAGE = (
    '"depclean unlock" expects dependencies as arguments or '
    "an option indicating which dependencies to unlock. "
    "The --all option will unlock all dependencies while "
    "the --unused option unlocks unused dependencies"
)


def _fail(error: DepCleanError) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _warn(message: str) -> None:
    click.echo(f"warning: {message}", err=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """depclean: remove dependency build artifacts and fetched sources."""
    setup_logging(verbose)


@main.command("clean")
@click.argument("names", nargs=-1)
@click.option("--manifest", default=_DEFAULT_MANIFEST, help="Project manifest path")
@click.option("--unlock", is_flag=True, help="Also unlock the deleted dependencies")
@click.option("--all", "all_", is_flag=True, help="Delete all dependencies")
@click.option("--only", default=None, help="Only clean dependencies of the given environment")
@click.option("--unused", is_flag=True, help="Delete dependencies no longer in the manifest")
@click.option("--build", "build_only", is_flag=True, help="Delete compiled files only, keep sources")
def clean(
    names: tuple[str, ...],
    manifest: str,
    unlock: bool,
    all_: bool,
    only: str | None,
    unused: bool,
    build_only: bool,
) -> None:
    """Delete the given dependencies' files.

    Works across all environments unless --only is given. Since this is
    destructive, nothing happens without NAMES, --all or --unused.
    """
    try:
        selection = Selection.from_options(names, all_=all_, unused=unused)
        scope = Scope(env=only)
        config = load_project(manifest)
        report = clean_deps(
            config,
            selection,
            scope=scope,
            build_only=build_only,
            unlock=unlock,
            on_progress=click.echo,
            on_warning=_warn,
        )
    except DepCleanError as e:
        _fail(e)

    if report.unlocked:
        click.echo(f"Unlocked: {', '.join(report.unlocked)}")


@main.command("unlock")
@click.argument("names", nargs=-1)
@click.option("--manifest", default=_DEFAULT_MANIFEST, help="Project manifest path")
@click.option("--all", "all_", is_flag=True, help="Unlock all dependencies")
@click.option("--unused", is_flag=True, help="Unlock dependencies no longer in the manifest")
def unlock(names: tuple[str, ...], manifest: str, all_: bool, unused: bool) -> None:
    """Remove the given dependencies from the lock file."""
    try:
        selection = Selection.from_options(
            names, all_=all_, unused=unused, message=_UNLOCK_USAGE
        )
        config = load_project(manifest)
        removed = unlock_deps(config, selection)
    except DepCleanError as e:
        _fail(e)

    if removed:
        click.echo(f"Unlocked: {', '.join(removed)}")
    else:
        click.echo("Nothing to unlock.")


if __name__ == "__main__":
    main()
