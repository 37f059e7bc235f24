"""Tests for shipit.output.errors."""

from __future__ import annotations

from shipit.core.errors import ErrorCode
from shipit.output.console import MockConsole, Style
from shipit.output.errors import print_release_error, release_exit_code
from shipit.services.release.errors import ReleaseError


def test_command_exit_status_is_propagated() -> None:
    error = ReleaseError(kind="push_failed", message="git push failed", returncode=128)
    assert release_exit_code(error) == 128


def test_kind_mapping_without_exit_status() -> None:
    assert release_exit_code(ReleaseError(kind="gh_missing", message="")) == ErrorCode.ENV_ERROR
    assert release_exit_code(ReleaseError(kind="not_a_repo", message="")) == ErrorCode.ENV_ERROR
    assert release_exit_code(ReleaseError(kind="tag_failed", message="")) == ErrorCode.RELEASE_ERROR
    assert (
        release_exit_code(ReleaseError(kind="run_not_found", message=""))
        == ErrorCode.NETWORK_ERROR
    )
    assert release_exit_code(ReleaseError(kind="invalid_input", message="")) == ErrorCode.USER_ERROR


def test_timeout_exit_status_is_not_propagated() -> None:
    error = ReleaseError(kind="workflow_failed", message="timed out", returncode=-1)
    assert release_exit_code(error) == ErrorCode.NETWORK_ERROR


def test_print_release_error_with_hint() -> None:
    console = MockConsole()
    print_release_error(
        ReleaseError(kind="gh_auth_required", message="gh auth required", hint="Run: gh auth login"),
        console,
    )
    assert console.messages == ["error: gh auth required", "hint: Run: gh auth login"]
    assert console.outputs[1].style == Style.DIM
