"""Tests for git/repository.py."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from shipit.core.result import Err, Ok, Result
from shipit.git import repository as repository_mod
from shipit.git.repository import Repository
from shipit.platform.process import ProcessError


class _FakeGit:
    def __init__(self, responses: dict[tuple[str, ...], Result[str, ProcessError]]) -> None:
        self.responses = responses
        self.calls: list[list[str]] = []

    def __call__(
        self, cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        assert cmd[:2] == ["git", "-C"]
        args = cmd[3:]
        self.calls.append(args)
        return self.responses.get(tuple(args), Ok(""))


def _fail(returncode: int, stderr: str) -> Err[ProcessError]:
    return Err(ProcessError(command=("git",), returncode=returncode, stdout="", stderr=stderr))


# =============================================================================
# Command construction
# =============================================================================


class TestCommands:
    def test_list_tags_splits_lines(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = _FakeGit({("tag", "-l", "v*"): Ok("v1.0.0\nv1.2.0\n\nv1.10.0\n")})
        monkeypatch.setattr(repository_mod, "run_process", fake)

        result = Repository(tmp_path).list_tags("v*")

        assert result == Ok(["v1.0.0", "v1.2.0", "v1.10.0"])

    def test_list_tags_empty(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(repository_mod, "run_process", _FakeGit({}))
        assert Repository(tmp_path).list_tags("v*") == Ok([])

    def test_diff_names_uses_range(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = _FakeGit(
            {("diff", "--name-only", "v1.2.3..HEAD"): Ok(".github/workflows/release.yml\nREADME.md\n")}
        )
        monkeypatch.setattr(repository_mod, "run_process", fake)

        result = Repository(tmp_path).diff_names("v1.2.3")

        assert result == Ok([".github/workflows/release.yml", "README.md"])

    def test_tag_and_push_arguments(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = _FakeGit({})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        repo = Repository(tmp_path)

        assert repo.create_tag("v1.2.4") == Ok(None)
        assert repo.force_tag("latest") == Ok(None)
        assert repo.push_tag("origin", "v1.2.4") == Ok(None)
        assert repo.push_tag("origin", "latest", force=True) == Ok(None)

        assert fake.calls == [
            ["tag", "v1.2.4"],
            ["tag", "-f", "latest"],
            ["push", "origin", "v1.2.4"],
            ["push", "origin", "latest", "--force"],
        ]

    def test_failure_carries_stderr_and_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit({("tag", "v1.2.4"): _fail(128, "fatal: tag 'v1.2.4' already exists\n")})
        monkeypatch.setattr(repository_mod, "run_process", fake)

        result = Repository(tmp_path).create_tag("v1.2.4")

        assert isinstance(result, Err)
        assert result.error.command == "tag v1.2.4"
        assert result.error.returncode == 128
        assert "already exists" in result.error.message

    def test_push_uses_network_timeout(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        seen: list[float | None] = []

        def fake_run(
            cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
        ) -> Result[str, ProcessError]:
            seen.append(timeout)
            return Ok("")

        monkeypatch.setattr(repository_mod, "run_process", fake_run)
        repo = Repository(tmp_path)
        repo.create_tag("v1.0.0")
        repo.push_tag("origin", "v1.0.0")

        assert seen[0] is not None and seen[1] is not None
        assert seen[1] > seen[0]


# =============================================================================
# Real git
# =============================================================================


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "dev@example.com")
    _git(tmp_path, "config", "user.name", "Dev")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    _git(tmp_path, "config", "tag.gpgsign", "false")
    (tmp_path / "README.md").write_text("hello\n", encoding="utf-8")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "init")
    return tmp_path


class TestRealRepository:
    def test_toplevel_from_subdirectory(self, git_repo: Path) -> None:
        sub = git_repo / "sub"
        sub.mkdir()
        repo = Repository(sub)
        top = repo.toplevel()
        assert isinstance(top, Ok)
        assert top.value.resolve() == git_repo.resolve()

    def test_not_a_repository(self, tmp_path: Path) -> None:
        if shutil.which("git") is None:
            pytest.skip("git not installed")
        plain = tmp_path / "plain"
        plain.mkdir()
        top = Repository(plain).toplevel()
        # A tmp dir could sit inside someone's checkout; only assert when it does not.
        if isinstance(top, Ok):
            pytest.skip("tmp_path is inside a git work tree")
        assert top.error.returncode != 0

    def test_tags_and_diff(self, git_repo: Path) -> None:
        repo = Repository(git_repo)
        assert repo.create_tag("v0.1.0") == Ok(None)

        wf = git_repo / ".github" / "workflows"
        wf.mkdir(parents=True)
        (wf / "release.yml").write_text("on: workflow_dispatch\n", encoding="utf-8")
        _git(git_repo, "add", ".")
        _git(git_repo, "commit", "-q", "-m", "add workflow")

        assert repo.list_tags("v*") == Ok(["v0.1.0"])
        assert repo.diff_names("v0.1.0") == Ok([".github/workflows/release.yml"])

        assert repo.force_tag("latest") == Ok(None)
        assert repo.force_tag("latest") == Ok(None)
        assert isinstance(repo.create_tag("v0.1.0"), Err)

    def test_push_without_remote_fails(self, git_repo: Path) -> None:
        repo = Repository(git_repo)
        repo.create_tag("v1.0.0")

        result = repo.push_tag("origin", "v1.0.0")

        assert isinstance(result, Err)
        assert result.error.returncode != 0
