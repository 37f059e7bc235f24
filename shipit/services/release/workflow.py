from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from time import monotonic, sleep

from shipit.core.config import WaitSettings, WorkflowSettings
from shipit.core.result import Err, Ok, Result
from shipit.core.structured import as_obj_list, as_str_dict, get_int, get_str
from shipit.output.console import ConsoleProtocol, Style
from shipit.platform.process import run as run_process
from shipit.platform.process import run_silent
from shipit.services.release.errors import ReleaseError
from shipit.services.release.gh import run_gh_read
from shipit.services.release.model import BumpKind, WorkflowRun
from shipit.services.release.timeouts import GH_TIMEOUT_SECONDS, RUN_LIST_LIMIT

_RUN_FIELDS = "databaseId,event,status,url"


@dataclass(frozen=True, slots=True)
class _ListedRun:
    run: WorkflowRun
    event: str | None


def _repo_args(workflow: WorkflowSettings) -> list[str]:
    return ["--repo", workflow.repo] if workflow.repo else []


def dispatch_workflow(
    *,
    cwd: Path,
    workflow: WorkflowSettings,
    bump: BumpKind,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, ReleaseError]:
    """Trigger the release workflow with the bump kind as an input.

    Never retried: a second dispatch would start a second run.
    """
    cmd = ["gh", "workflow", "run", workflow.file, *_repo_args(workflow)]
    if workflow.ref:
        cmd.extend(["--ref", workflow.ref])
    cmd.extend(["-f", f"{workflow.bump_input}={bump}"])

    console.command(cmd)
    if dry_run:
        return Ok(None)

    result = run_process(cmd, cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="workflow_failed",
                message=f"failed to dispatch workflow {workflow.file}",
                hint=e.stderr.strip() or None,
                returncode=e.returncode,
            )
        )
    return Ok(None)


def _list_runs(
    *, cwd: Path, workflow: WorkflowSettings, limit: int
) -> Result[list[_ListedRun], ReleaseError]:
    cmd = [
        "gh",
        "run",
        "list",
        *_repo_args(workflow),
        "--workflow",
        workflow.file,
        "--limit",
        str(limit),
        "--json",
        _RUN_FIELDS,
    ]
    result = run_gh_read(
        cwd=cwd,
        cmd=cmd,
        kind="workflow_failed",
        message=f"failed to query runs of {workflow.file}",
    )
    if isinstance(result, Err):
        return result

    try:
        obj: object = json.loads(result.value or "[]")
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(kind="workflow_failed", message=f"invalid JSON from gh run list: {e}")
        )

    raw = as_obj_list(obj)
    if raw is None:
        return Err(ReleaseError(kind="workflow_failed", message="unexpected gh run list payload"))

    runs: list[_ListedRun] = []
    for item in raw:
        d = as_str_dict(item)
        if d is None:
            continue
        run_id = get_int(d, "databaseId")
        if run_id is None:
            continue
        runs.append(
            _ListedRun(
                run=WorkflowRun(id=run_id, url=get_str(d, "url"), status=get_str(d, "status")),
                event=get_str(d, "event"),
            )
        )
    return Ok(runs)


def latest_run(
    *, cwd: Path, workflow: WorkflowSettings
) -> Result[WorkflowRun | None, ReleaseError]:
    """Most recently created run of the workflow, None if it never ran."""
    listed = _list_runs(cwd=cwd, workflow=workflow, limit=1)
    if isinstance(listed, Err):
        return listed
    if not listed.value:
        return Ok(None)
    return Ok(listed.value[0].run)


def wait_for_new_run(
    *,
    cwd: Path,
    workflow: WorkflowSettings,
    wait: WaitSettings,
    after: int | None,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[WorkflowRun, ReleaseError]:
    """Poll until the dispatched run shows up in the run list.

    A run qualifies when it was started by workflow_dispatch and its id is
    greater than `after`, the newest run seen before dispatching. Gives up
    with run_not_found once wait.timeout_seconds have elapsed.
    """
    console.print(f"Waiting for {workflow.file} run to register...", Style.DIM)
    if dry_run:
        return Ok(WorkflowRun(id=0))

    deadline = monotonic() + wait.timeout_seconds
    sleep(wait.settle_seconds)
    while True:
        listed = _list_runs(cwd=cwd, workflow=workflow, limit=RUN_LIST_LIMIT)
        if isinstance(listed, Err):
            return listed

        for item in listed.value:
            if item.event != "workflow_dispatch":
                continue
            if after is not None and item.run.id <= after:
                continue
            return Ok(item.run)

        if monotonic() >= deadline:
            return Err(
                ReleaseError(
                    kind="run_not_found",
                    message=f"no new {workflow.file} run after {wait.timeout_seconds:g}s",
                    hint="Check the Actions tab; the dispatch may still be queued.",
                )
            )
        sleep(wait.poll_interval_seconds)


def most_recent_run(
    *,
    cwd: Path,
    workflow: WorkflowSettings,
    wait: WaitSettings,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[WorkflowRun, ReleaseError]:
    """Settle once, then take whatever run is newest."""
    console.print(f"Waiting {wait.settle_seconds:g}s for {workflow.file}...", Style.DIM)
    if dry_run:
        return Ok(WorkflowRun(id=0))

    sleep(wait.settle_seconds)
    found = latest_run(cwd=cwd, workflow=workflow)
    if isinstance(found, Err):
        return found
    if found.value is None:
        return Err(
            ReleaseError(kind="run_not_found", message=f"no runs found for {workflow.file}")
        )
    return Ok(found.value)


def watch_run(
    *,
    cwd: Path,
    workflow: WorkflowSettings,
    run: WorkflowRun,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, ReleaseError]:
    """Attach to the run's live view until it finishes.

    No timeout: the watch lasts as long as the run. `--exit-status` makes a
    failed run fail the watch.
    """
    run_ref = str(run.id) if run.id > 0 else "RUN_ID"
    cmd = ["gh", "run", "watch", run_ref, *_repo_args(workflow), "--exit-status"]
    console.command(cmd)
    if dry_run or run.id <= 0:
        return Ok(None)

    result = run_silent(cmd, cwd=cwd)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="workflow_failed",
                message=f"workflow run {run.id} failed",
                hint=run.url or e.stderr.strip() or None,
                returncode=e.returncode,
            )
        )
    return Ok(None)
