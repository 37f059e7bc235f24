from __future__ import annotations

from pathlib import Path

import typer

from shipit import __version__
from shipit.cli.context import build_context
from shipit.core.errors import ErrorCode
from shipit.core.result import Err
from shipit.output.errors import print_release_error, release_exit_code
from shipit.services.release.model import BUMP_KINDS, parse_bump
from shipit.services.release.service import TriggerOptions, trigger_release

USAGE = f"Usage: shipit [{'|'.join(BUMP_KINDS)}]"

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Bump the version tag and trigger the release workflow.",
)


@app.command()
def release(
    bump: str | None = typer.Argument(
        None,
        metavar="[patch|minor|major]",
        help="Version component to bump (default: patch).",
        show_default=False,
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the git/gh commands that change state without running them."
    ),
    watch: bool = typer.Option(
        True, "--watch/--no-watch", help="Follow the run until it finishes."
    ),
    tags: bool = typer.Option(
        True,
        "--tags/--no-tags",
        help="Compute the next version and tag locally when workflow files changed.",
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Settings file (default: shipit.toml at the repo root)."
    ),
    repo_dir: Path = typer.Option(
        Path("."), "--repo-dir", help="Directory inside the repository to release."
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Bump the version tag and trigger the release workflow."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    kind = parse_bump(bump)
    if kind is None:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context(repo_dir=repo_dir, config_path=config)
    result = trigger_release(
        repo=ctx.repo,
        settings=ctx.settings,
        options=TriggerOptions(bump=kind, dry_run=dry_run, watch=watch, tagging=tags),
        console=ctx.console,
    )
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_exit_code(result.error))


def main() -> None:
    app()
