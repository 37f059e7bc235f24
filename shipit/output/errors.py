"""Error presentation and exit code mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipit.core.errors import ErrorCode
from shipit.output.console import Style
from shipit.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from shipit.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_exit_code(error: ReleaseError) -> int:
    """Exit code for a failed release.

    A failing git/gh command's own exit status wins; errors without one
    (missing tools, timeouts, lookup deadlines) map by kind.
    """
    if error.returncode is not None and error.returncode > 0:
        return error.returncode

    match error.kind:
        case "git_missing" | "gh_missing" | "gh_auth_required" | "not_a_repo":
            return int(ErrorCode.ENV_ERROR)
        case "tag_failed" | "push_failed":
            return int(ErrorCode.RELEASE_ERROR)
        case "workflow_failed" | "run_not_found":
            return int(ErrorCode.NETWORK_ERROR)
        case "invalid_input":
            return int(ErrorCode.USER_ERROR)
    return int(ErrorCode.USER_ERROR)
