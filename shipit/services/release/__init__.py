"""Version bump and remote release workflow trigger."""

from shipit.services.release.errors import ReleaseError
from shipit.services.release.model import BUMP_KINDS, BumpKind, ReleasePlan, WorkflowRun, parse_bump
from shipit.services.release.semver import SemVer, latest_stable, parse_stable_tag
from shipit.services.release.service import (
    TriggerOptions,
    apply_tags,
    open_repository,
    plan_release,
    trigger_release,
)

__all__ = [
    "BUMP_KINDS",
    "BumpKind",
    "ReleaseError",
    "ReleasePlan",
    "SemVer",
    "TriggerOptions",
    "WorkflowRun",
    "apply_tags",
    "latest_stable",
    "open_repository",
    "parse_bump",
    "parse_stable_tag",
    "plan_release",
    "trigger_release",
]
