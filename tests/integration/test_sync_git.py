"""Integration tests for publishing against real git repositories.

A bare repository stands in for GitHub's "origin"; ``gh`` is answered by
GhStubRunner from conftest.py.  Tests are skipped when git is not installed.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ledger_panel.config import Config
from ledger_panel.errors import CommandFailed
from ledger_panel.git.sync import PublishStatus, synchronize_and_publish
from ledger_panel.workspace import Workspace

from conftest import GhStubRunner, git


@pytest.fixture
def gh() -> GhStubRunner:
    return GhStubRunner()


@pytest.fixture
def work(ledger_repo: dict[str, Path]) -> Path:
    return ledger_repo["work"]


@pytest.fixture
def ws(work: Path, gh: GhStubRunner) -> Workspace:
    return Workspace(Config(repo_path=work, lock_timeout_s=1), runner=gh)


def _append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as fh:
        fh.write(text)


def _other_clone(ledger_repo: dict[str, Path]) -> Path:
    other = ledger_repo["root"] / "other"
    git(ledger_repo["root"], "clone", str(ledger_repo["remote"]), str(other))
    return other


def test_first_publish_commits_only_ledger(ws, work, gh, ledger_repo):
    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')
    _append(work / "notes.txt", "scratch\n")

    result = synchronize_and_publish(ws, "Add coffee")

    assert result.status is PublishStatus.CREATED
    assert result.pr_url == "https://github.com/owner/ledger/pull/1"
    assert gh.created == [result.pr_url]

    assert git(work, "rev-parse", "--abbrev-ref", "HEAD").strip() == "edit"
    assert git(work, "log", "-1", "--format=%s").strip() == "Add coffee"
    changed = git(work, "diff-tree", "--no-commit-id", "--name-only", "-r", "HEAD").split()
    assert changed == ["main.bean"]
    # Unrelated edits stay in the working tree, uncommitted.
    assert "notes.txt" in git(work, "status", "--porcelain")

    remote_head = git(ledger_repo["remote"], "rev-parse", "edit").strip()
    assert remote_head == result.commit_sha


def test_second_publish_without_changes(ws, work, gh):
    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')
    synchronize_and_publish(ws, "Add coffee")

    result = synchronize_and_publish(ws, "Nothing new")

    assert result.status is PublishStatus.NO_CHANGES
    assert str(result) == "No changes to commit"
    assert len(gh.created) == 1
    assert git(work, "log", "-1", "--format=%s").strip() == "Add coffee"


def test_new_edits_reuse_open_pr(ws, work, gh, ledger_repo):
    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')
    first = synchronize_and_publish(ws, "Add coffee")

    _append(work / "main.bean", '2025-01-03 * "Tea"\n')
    second = synchronize_and_publish(ws, "Add tea")

    assert second.status is PublishStatus.EXISTING
    assert second.pr_url == first.pr_url
    assert len(gh.created) == 1
    assert git(ledger_repo["remote"], "rev-parse", "edit").strip() == second.commit_sha


def test_long_message_truncated(ws, work):
    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')

    synchronize_and_publish(ws, "a" * 400)

    assert git(work, "log", "-1", "--format=%s").strip() == "a" * 300 + "…"


def test_author_attribution(ws, work):
    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')

    synchronize_and_publish(ws, "Add coffee", author_email="alice@example.com")

    assert git(work, "log", "-1", "--format=%an <%ae>").strip() == "alice <alice@example.com>"


def test_merges_remote_main(ws, work, ledger_repo):
    other = _other_clone(ledger_repo)
    (other / "prices.bean").write_text("2025-01-01 price USD 133.50 NPR\n", encoding="utf-8")
    git(other, "add", "prices.bean")
    git(other, "commit", "-m", "Add prices")
    git(other, "push", "origin", "main")

    _append(work / "main.bean", '2025-01-02 * "Coffee"\n')
    result = synchronize_and_publish(ws, "Add coffee")

    assert result.status is PublishStatus.CREATED
    assert (work / "prices.bean").is_file()
    remote_files = git(ledger_repo["remote"], "ls-tree", "--name-only", "edit").split()
    assert "prices.bean" in remote_files


def test_conflicting_merge_is_aborted(ws, work, ledger_repo):
    (work / "main.bean").write_text("2025-01-01 open Assets:Bank:HBL USD\n", encoding="utf-8")
    published = synchronize_and_publish(ws, "Switch currency")

    other = _other_clone(ledger_repo)
    (other / "main.bean").write_text("2025-01-01 open Assets:Bank:Nabil NPR\n", encoding="utf-8")
    git(other, "commit", "-am", "Rename bank")
    git(other, "push", "origin", "main")

    with pytest.raises(CommandFailed, match="Merge origin/main failed"):
        synchronize_and_publish(ws, "Try again")

    assert not (work / ".git" / "MERGE_HEAD").exists()
    assert git(work, "rev-parse", "--abbrev-ref", "HEAD").strip() == "edit"
    assert git(work, "rev-parse", "HEAD").strip() == published.commit_sha
    assert git(work, "status", "--porcelain", "--untracked-files=no") == ""
    assert not ws.busy
