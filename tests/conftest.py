"""Pytest configuration and fixtures for Ledger Panel tests.

This module provides a FakeRunner that can be used for testing without
running git, gh or bean-query, and a helper that builds a real git
repository with a bare "origin" remote for integration tests.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ledger_panel.config import Config
from ledger_panel.web import create_app
from ledger_panel.workspace import CommandResult, SubprocessRunner, Workspace


class FakeRunner:
    """A fake runner that records commands and returns scripted results.

    Responses are matched by argv prefix in registration order.  A response
    registered with ``times`` is used that many times and then skipped.
    Unmatched commands succeed with empty output.

    This is ONLY for testing - not used in production.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.cwds: list[Path] = []
        self.timeouts: list[int] = []
        self._responses: list[list[object]] = []

    def respond(
        self,
        *prefix: str,
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
        timed_out: bool = False,
        times: int | None = None,
    ) -> None:
        fields = {"exit_code": exit_code, "stdout": stdout, "stderr": stderr, "timed_out": timed_out}
        self._responses.append([tuple(prefix), fields, times])

    def run(self, argv: Sequence[str], cwd: Path, timeout_s: int) -> CommandResult:
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(Path(cwd))
        self.timeouts.append(timeout_s)
        for entry in self._responses:
            prefix, fields, remaining = entry
            if tuple(argv[: len(prefix)]) != prefix:
                continue
            if remaining is not None:
                if remaining <= 0:
                    continue
                entry[2] = remaining - 1
            return CommandResult(argv=tuple(argv), **fields)
        return CommandResult(argv=tuple(argv), exit_code=0)

    def commands(self, program: str) -> list[list[str]]:
        """Return recorded argv lists whose program is ``program``."""
        return [c for c in self.calls if c and c[0] == program]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.calls)


def script_publish(
    runner: FakeRunner,
    *,
    branch: str = "main",
    staged: bool = True,
    existing_pr: str | None = None,
    created_url: str = "https://github.com/owner/ledger/pull/1",
) -> None:
    """Script the git and gh responses for a publish run."""
    runner.respond("git", "rev-parse", "--abbrev-ref", "HEAD", stdout=f"{branch}\n")
    runner.respond("git", "rev-parse", "HEAD", stdout="0123456789abcdef0123456789abcdef01234567\n")
    runner.respond("git", "diff", "--cached", "--quiet", exit_code=1 if staged else 0)
    prs = [{"url": existing_pr}] if existing_pr else []
    runner.respond("gh", "pr", "list", stdout=json.dumps(prs))
    runner.respond(
        "gh",
        "pr",
        "create",
        stdout=f"Creating pull request for edit into main in owner/ledger\n\n{created_url}\n",
    )


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    path = tmp_path / "ledger"
    path.mkdir()
    return path


@pytest.fixture
def config(repo_dir: Path) -> Config:
    return Config(
        repo_path=repo_dir,
        repo_url="https://github.com/owner/ledger",
        downloader_command=["go", "run", "download.go"],
        lock_timeout_s=1,
        github_token="ghp_secret_token_value",
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workspace(config: Config, runner: FakeRunner) -> Workspace:
    return Workspace(config, runner=runner)


@pytest.fixture
def client(config: Config, runner: FakeRunner) -> TestClient:
    return TestClient(create_app(config, runner=runner))


# --- Real git repositories -------------------------------------------------


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` for test setup and return stdout."""
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        check=True,
    )
    return proc.stdout


class GhStubRunner(SubprocessRunner):
    """Run git for real and answer ``gh`` from an in-memory PR list."""

    def __init__(self) -> None:
        super().__init__()
        self.open_prs: list[str] = []
        self.created: list[str] = []

    def run(self, argv: Sequence[str], cwd: Path, timeout_s: int) -> CommandResult:
        argv = list(argv)
        if argv[0] != "gh":
            return super().run(argv, cwd, timeout_s)
        if argv[1:3] == ["pr", "list"]:
            return CommandResult(argv=tuple(argv), exit_code=0, stdout=json.dumps([{"url": u} for u in self.open_prs]))
        if argv[1:3] == ["pr", "create"]:
            url = f"https://github.com/owner/ledger/pull/{len(self.created) + 1}"
            self.created.append(url)
            self.open_prs.append(url)
            return CommandResult(argv=tuple(argv), exit_code=0, stdout=url + "\n")
        return CommandResult(argv=tuple(argv), exit_code=1, stderr=f"unexpected gh call: {argv}")


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text("[init]\n\tdefaultBranch = main\n", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")


@pytest.fixture
def ledger_repo(tmp_path: Path, git_env: None) -> dict[str, Path]:
    """A clone of a bare remote with ``main.bean`` committed on ``main``."""
    remote = tmp_path / "remote.git"
    work = tmp_path / "work"
    git(tmp_path, "init", "--bare", str(remote))
    git(remote, "symbolic-ref", "HEAD", "refs/heads/main")
    git(tmp_path, "init", str(work))
    git(work, "symbolic-ref", "HEAD", "refs/heads/main")

    (work / "main.bean").write_text("2025-01-01 open Assets:Bank:HBL NPR\n", encoding="utf-8")
    (work / "notes.txt").write_text("notes\n", encoding="utf-8")
    git(work, "add", "main.bean", "notes.txt")
    git(work, "commit", "-m", "Initial ledger")
    git(work, "remote", "add", "origin", str(remote))
    git(work, "push", "-u", "origin", "main")
    return {"remote": remote, "work": work, "root": tmp_path}
