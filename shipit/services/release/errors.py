from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "git_missing",
    "gh_missing",
    "gh_auth_required",
    "not_a_repo",
    "invalid_input",
    "tag_failed",
    "push_failed",
    "workflow_failed",
    "run_not_found",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A failed release step.

    returncode is the exit status of the external command that failed, when
    there was one; the CLI exits with it.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    returncode: int | None = None
