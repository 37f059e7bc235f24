"""Git repository abstraction.

Repository wraps the handful of `git` invocations a release needs: listing
version tags, diffing paths between refs, creating and moving tags, and
pushing them. All operations return Result types.

Usage:
    repo = Repository(Path("."))

    match repo.list_tags("v*"):
        case Ok(tags):
            print(tags)
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shipit.core.result import Err, Ok, Result
from shipit.platform.process import ProcessError
from shipit.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "tag -f latest")
        message: Error message (stderr when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A local git work tree.

    Attributes:
        path: Directory git is run in
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def toplevel(self) -> Result[Path, GitError]:
        """Resolve the root directory of the work tree."""
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse --show-toplevel", e, "not a git repository"))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    def list_tags(self, pattern: str) -> Result[list[str], GitError]:
        """List tags matching a glob (`git tag -l <pattern>`)."""
        result = self._run(["tag", "-l", pattern])
        match result:
            case Err(e):
                return Err(_git_error(f"tag -l {pattern}", e, "listing tags failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def diff_names(self, base: str, head: str = "HEAD") -> Result[list[str], GitError]:
        """Paths that differ between two refs (`git diff --name-only base..head`)."""
        result = self._run(["diff", "--name-only", f"{base}..{head}"])
        match result:
            case Err(e):
                return Err(_git_error(f"diff --name-only {base}..{head}", e, "diff failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def create_tag(self, name: str) -> Result[None, GitError]:
        """Create a lightweight tag at HEAD. Fails if the tag exists."""
        return self._mutate(["tag", name], "tag creation failed")

    def force_tag(self, name: str) -> Result[None, GitError]:
        """Create or move a tag to HEAD (`git tag -f`)."""
        return self._mutate(["tag", "-f", name], "moving tag failed")

    def push_tag(self, remote: str, name: str, *, force: bool = False) -> Result[None, GitError]:
        """Push a single tag to a remote."""
        args = ["push", remote, name]
        if force:
            args.append("--force")
        return self._mutate(args, "push failed")

    def _mutate(self, args: list[str], fallback: str) -> Result[None, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(" ".join(args), e, fallback))
            case Ok(_):
                return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )
