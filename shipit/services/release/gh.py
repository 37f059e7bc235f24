from __future__ import annotations

import shutil
from pathlib import Path
from time import sleep

from shipit.core.result import Err, Ok, Result
from shipit.platform.process import ProcessError
from shipit.platform.process import run as run_process
from shipit.services.release.errors import ReleaseError, ReleaseErrorKind
from shipit.services.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "tls handshake timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    if error.returncode == -1 and "timed out" in text:
        return True
    return any(marker in text for marker in markers)


def run_gh_read(
    *,
    cwd: Path,
    cmd: list[str],
    kind: ReleaseErrorKind,
    message: str,
    hint: str | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, ReleaseError]:
    """Run a read-only gh command, retrying transient network failures.

    Only use this for idempotent queries: dispatching a workflow twice would
    start two runs.
    """
    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=cwd, timeout=timeout)
        if isinstance(result, Ok):
            return result

        error = result.error
        if attempt < attempts - 1 and _is_transient_gh_error(error):
            sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        return Err(
            ReleaseError(
                kind=kind,
                message=message,
                hint=error.stderr.strip() or hint,
                returncode=error.returncode,
            )
        )

    return Err(ReleaseError(kind=kind, message=message, hint=hint))


def ensure_git_available() -> Result[None, ReleaseError]:
    if shutil.which("git") is None:
        return Err(
            ReleaseError(
                kind="git_missing",
                message="git: missing",
                hint="Install git: https://git-scm.com/downloads",
            )
        )
    return Ok(None)


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, cwd: Path) -> Result[None, ReleaseError]:
    result = run_process(["gh", "auth", "status"], cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        if e.returncode < 0:
            return Err(
                ReleaseError(
                    kind="gh_auth_required",
                    message="could not check gh auth status",
                    hint=e.stderr.strip() or None,
                )
            )
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint=e.stderr.strip() or "Run: gh auth login",
                returncode=e.returncode,
            )
        )
    return Ok(None)
