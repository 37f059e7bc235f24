from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal, cast

from shipit.services.release.semver import SemVer

BumpKind = Literal["patch", "minor", "major"]

BUMP_KINDS: Final[tuple[BumpKind, ...]] = ("patch", "minor", "major")
DEFAULT_BUMP: Final[BumpKind] = "patch"


def parse_bump(raw: str | None) -> BumpKind | None:
    """Validate a bump kind argument.

    No argument means a patch bump. Anything outside BUMP_KINDS is rejected
    (case-sensitive, no surrounding whitespace).
    """
    if raw is None:
        return DEFAULT_BUMP
    if raw in BUMP_KINDS:
        return cast(BumpKind, raw)
    return None


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """What a release will do, computed before any side effect.

    previous_tag is None when the repository has no version tag yet; the
    computation then starts from 0.0.0.
    """

    bump: BumpKind
    previous_tag: str | None
    previous: SemVer
    next: SemVer
    next_tag: str
    workflow_changes: tuple[str, ...]

    @property
    def will_tag(self) -> bool:
        """Tags are created locally only when workflow definitions changed."""
        return bool(self.workflow_changes)


@dataclass(frozen=True, slots=True)
class WorkflowRun:
    id: int
    url: str | None = None
    status: str | None = None
