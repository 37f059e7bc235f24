from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from shipit.core.config import Settings, load_config, load_config_or_default
from shipit.core.errors import ErrorCode
from shipit.core.result import Err
from shipit.git.repository import Repository
from shipit.output.console import ConsoleProtocol, RichConsole, Style
from shipit.output.errors import print_release_error, release_exit_code
from shipit.services.release.service import open_repository


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: Repository
    settings: Settings
    console: ConsoleProtocol


def build_context(*, repo_dir: Path, config_path: Path | None) -> CLIContext:
    console = RichConsole()

    opened = open_repository(repo_dir)
    if isinstance(opened, Err):
        print_release_error(opened.error, console)
        raise typer.Exit(code=release_exit_code(opened.error))
    repo = opened.value

    if config_path is not None:
        loaded = load_config(config_path)
    else:
        loaded = load_config_or_default(repo.path)
    if isinstance(loaded, Err):
        console.error(loaded.error.message)
        if loaded.error.path is not None:
            console.print(f"config: {loaded.error.path}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    return CLIContext(repo=repo, settings=loaded.value, console=console)
