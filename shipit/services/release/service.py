"""Release trigger orchestration.

A release runs strictly in order and stops at the first failure:

    plan -> (tag, move floating tag, push both) -> dispatch -> find run -> watch

Tags are only created here when workflow definitions changed since the
previous version tag. Otherwise the remote workflow computes and applies
the tag itself. Nothing is rolled back: a tag pushed before a later step
fails stays pushed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shipit.core.config import Settings
from shipit.core.result import Err, Ok, Result
from shipit.git.repository import GitError, Repository
from shipit.output.console import ConsoleProtocol, Style
from shipit.services.release.errors import ReleaseError, ReleaseErrorKind
from shipit.services.release.gh import ensure_gh_auth, ensure_gh_available, ensure_git_available
from shipit.services.release.model import BumpKind, ReleasePlan, WorkflowRun
from shipit.services.release.semver import ZERO, latest_stable
from shipit.services.release.workflow import (
    dispatch_workflow,
    latest_run,
    most_recent_run,
    wait_for_new_run,
    watch_run,
)


@dataclass(frozen=True, slots=True)
class TriggerOptions:
    """Per-invocation switches.

    Attributes:
        bump: Which version component to increment.
        dry_run: Echo commands that change state instead of running them.
        watch: Attach to the run until it finishes.
        tagging: Compute the next version and tag locally on workflow changes.
            When False, only dispatch and watch the newest run.
    """

    bump: BumpKind
    dry_run: bool = False
    watch: bool = True
    tagging: bool = True


def _from_git(kind: ReleaseErrorKind, error: GitError) -> ReleaseError:
    return ReleaseError(
        kind=kind,
        message=f"git {error.command} failed",
        hint=error.message or None,
        returncode=error.returncode,
    )


def open_repository(path: Path) -> Result[Repository, ReleaseError]:
    """Resolve the work tree containing path."""
    ok = ensure_git_available()
    if isinstance(ok, Err):
        return ok

    top = Repository(path).toplevel()
    if isinstance(top, Err):
        return Err(
            ReleaseError(
                kind="not_a_repo",
                message=f"not a git repository: {path}",
                hint=top.error.message or None,
            )
        )
    return Ok(Repository(top.value))


def plan_release(
    *, repo: Repository, bump: BumpKind, settings: Settings
) -> Result[ReleasePlan, ReleaseError]:
    """Compute the next version and look for workflow-definition changes.

    Without a previous version tag there is nothing to diff against, so no
    change is reported and the remote workflow does the tagging.
    """
    tags = repo.list_tags(settings.tags.pattern)
    if isinstance(tags, Err):
        return Err(_from_git("invalid_input", tags.error))

    prefix = settings.tags.prefix
    found = latest_stable(tags.value, prefix)
    previous_tag, previous = found if found is not None else (None, ZERO)
    nxt = previous.bump(bump)

    changes: tuple[str, ...] = ()
    if previous_tag is not None:
        diff = repo.diff_names(previous_tag)
        if isinstance(diff, Err):
            return Err(_from_git("invalid_input", diff.error))
        workflows_prefix = settings.git.workflows_dir + "/"
        changes = tuple(p for p in diff.value if p.startswith(workflows_prefix))

    return Ok(
        ReleasePlan(
            bump=bump,
            previous_tag=previous_tag,
            previous=previous,
            next=nxt,
            next_tag=nxt.to_tag(prefix),
            workflow_changes=changes,
        )
    )


def apply_tags(
    *,
    repo: Repository,
    plan: ReleasePlan,
    settings: Settings,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, ReleaseError]:
    """Create the version tag, move the floating tag, push both."""
    remote = settings.git.remote
    floating = settings.tags.floating

    console.command(["git", "tag", plan.next_tag])
    if not dry_run:
        r = repo.create_tag(plan.next_tag)
        if isinstance(r, Err):
            return Err(_from_git("tag_failed", r.error))

    console.command(["git", "tag", "-f", floating])
    if not dry_run:
        r = repo.force_tag(floating)
        if isinstance(r, Err):
            return Err(_from_git("tag_failed", r.error))

    console.command(["git", "push", remote, plan.next_tag])
    if not dry_run:
        r = repo.push_tag(remote, plan.next_tag)
        if isinstance(r, Err):
            return Err(_from_git("push_failed", r.error))

    console.command(["git", "push", remote, floating, "--force"])
    if not dry_run:
        r = repo.push_tag(remote, floating, force=True)
        if isinstance(r, Err):
            return Err(_from_git("push_failed", r.error))

    return Ok(None)


def _print_plan(plan: ReleasePlan, *, prefix: str, console: ConsoleProtocol) -> None:
    previous = plan.previous_tag or plan.previous.to_tag(prefix)
    console.print(f"Bumping {plan.bump}: {previous} -> {plan.next_tag}")
    if plan.previous_tag is None:
        console.print("no version tag yet, starting from " + previous, Style.DIM)


def trigger_release(
    *,
    repo: Repository,
    settings: Settings,
    options: TriggerOptions,
    console: ConsoleProtocol,
) -> Result[WorkflowRun, ReleaseError]:
    """Run a release end to end. Returns the run that was dispatched."""
    ok = ensure_gh_available()
    if isinstance(ok, Err):
        return ok
    ok = ensure_gh_auth(cwd=repo.path)
    if isinstance(ok, Err):
        return ok

    workflow = settings.workflow
    if options.dry_run:
        console.warning("dry run: no tag, push or dispatch will be performed")

    if options.tagging:
        planned = plan_release(repo=repo, bump=options.bump, settings=settings)
        if isinstance(planned, Err):
            return planned
        plan = planned.value
        _print_plan(plan, prefix=settings.tags.prefix, console=console)

        if plan.will_tag:
            console.print("Workflow changes detected - creating tag locally...")
            for path in plan.workflow_changes:
                console.print(f"  {path}", Style.DIM)
            tagged = apply_tags(
                repo=repo,
                plan=plan,
                settings=settings,
                console=console,
                dry_run=options.dry_run,
            )
            if isinstance(tagged, Err):
                return tagged
            console.print("Tags pushed. Triggering build...")
        else:
            console.print("No workflow changes - using GitHub Actions...")

    before: int | None = None
    if options.tagging and not options.dry_run:
        seen = latest_run(cwd=repo.path, workflow=workflow)
        if isinstance(seen, Err):
            return seen
        before = seen.value.id if seen.value is not None else None

    dispatched = dispatch_workflow(
        cwd=repo.path,
        workflow=workflow,
        bump=options.bump,
        console=console,
        dry_run=options.dry_run,
    )
    if isinstance(dispatched, Err):
        return dispatched

    if options.tagging:
        found = wait_for_new_run(
            cwd=repo.path,
            workflow=workflow,
            wait=settings.wait,
            after=before,
            console=console,
            dry_run=options.dry_run,
        )
    else:
        found = most_recent_run(
            cwd=repo.path,
            workflow=workflow,
            wait=settings.wait,
            console=console,
            dry_run=options.dry_run,
        )
    if isinstance(found, Err):
        return found
    run = found.value

    if not options.watch:
        console.success(f"dispatched run {run.id}" + (f": {run.url}" if run.url else ""))
        return Ok(run)

    label = str(run.id) if run.id > 0 else "(dry-run)"
    console.print(f"Watching run {label}...")
    watched = watch_run(
        cwd=repo.path,
        workflow=workflow,
        run=run,
        console=console,
        dry_run=options.dry_run,
    )
    if isinstance(watched, Err):
        return watched

    console.success(f"run {label} finished")
    return Ok(run)
