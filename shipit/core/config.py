"""Typed configuration loading.

Settings come from an optional `shipit.toml` at the repository root. Every
key has a default matching the conventional GitHub layout, so a repository
without the file works out of the box.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitSettings",
    "Settings",
    "TagSettings",
    "WaitSettings",
    "WorkflowSettings",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "shipit.toml"

DEFAULT_TAG_PREFIX = "v"
DEFAULT_FLOATING_TAG = "latest"
DEFAULT_REMOTE = "origin"
DEFAULT_WORKFLOWS_DIR = ".github/workflows"
DEFAULT_WORKFLOW_FILE = "release.yml"
DEFAULT_BUMP_INPUT = "bump"

DEFAULT_SETTLE_SECONDS = 3.0
DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_WAIT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class TagSettings:
    prefix: str = DEFAULT_TAG_PREFIX
    floating: str = DEFAULT_FLOATING_TAG

    @property
    def pattern(self) -> str:
        """Glob passed to `git tag -l`."""
        return f"{self.prefix}*"


@dataclass(frozen=True, slots=True)
class GitSettings:
    remote: str = DEFAULT_REMOTE
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR


@dataclass(frozen=True, slots=True)
class WorkflowSettings:
    """Remote workflow dispatched by gh.

    Attributes:
        file: Workflow file name (or name/id) understood by `gh workflow run`.
        bump_input: workflow_dispatch input receiving the bump kind.
        repo: Optional owner/name passed as `--repo`.
        ref: Optional git ref passed as `--ref`.
    """

    file: str = DEFAULT_WORKFLOW_FILE
    bump_input: str = DEFAULT_BUMP_INPUT
    repo: str | None = None
    ref: str | None = None


@dataclass(frozen=True, slots=True)
class WaitSettings:
    """Run lookup timing after a dispatch."""

    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    timeout_seconds: float = DEFAULT_WAIT_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class Settings:
    """Main configuration container."""

    tags: TagSettings = field(default_factory=TagSettings)
    git: GitSettings = field(default_factory=GitSettings)
    workflow: WorkflowSettings = field(default_factory=WorkflowSettings)
    wait: WaitSettings = field(default_factory=WaitSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        """Create Settings from a mapping (parsed TOML)."""
        tags: StrDict = get_table(data, "tags") or {}
        git: StrDict = get_table(data, "git") or {}
        workflow: StrDict = get_table(data, "workflow") or {}
        wait: StrDict = get_table(data, "wait") or {}

        settle = get_float(wait, "settle_seconds")
        interval = get_float(wait, "poll_interval_seconds")
        timeout = get_float(wait, "timeout_seconds")
        if settle is not None and settle < 0:
            raise ValueError("wait.settle_seconds must be >= 0")
        if interval is not None and interval <= 0:
            raise ValueError("wait.poll_interval_seconds must be > 0")
        if timeout is not None and timeout <= 0:
            raise ValueError("wait.timeout_seconds must be > 0")

        return cls(
            tags=TagSettings(
                prefix=get_str(tags, "prefix") or DEFAULT_TAG_PREFIX,
                floating=get_str(tags, "floating") or DEFAULT_FLOATING_TAG,
            ),
            git=GitSettings(
                remote=get_str(git, "remote") or DEFAULT_REMOTE,
                workflows_dir=(get_str(git, "workflows_dir") or DEFAULT_WORKFLOWS_DIR).rstrip("/"),
            ),
            workflow=WorkflowSettings(
                file=get_str(workflow, "file") or DEFAULT_WORKFLOW_FILE,
                bump_input=get_str(workflow, "bump_input") or DEFAULT_BUMP_INPUT,
                repo=get_str(workflow, "repo"),
                ref=get_str(workflow, "ref"),
            ),
            wait=WaitSettings(
                settle_seconds=DEFAULT_SETTLE_SECONDS if settle is None else settle,
                poll_interval_seconds=interval or DEFAULT_POLL_INTERVAL_SECONDS,
                timeout_seconds=timeout or DEFAULT_WAIT_TIMEOUT_SECONDS,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Settings, ConfigError]:
    """Load and parse settings from a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Ok(Settings) on success, Err(ConfigError) on failure.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Settings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(root: Path) -> Result[Settings, ConfigError]:
    """Load `shipit.toml` under root; defaults when the file does not exist.

    A file that exists but is invalid is still an error.
    """
    path = root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Settings())
    return load_config(path)
