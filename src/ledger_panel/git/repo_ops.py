"""Git repository operations.

One function per git step used while publishing ledger edits.  Each takes
the ``Workspace`` and raises ``CommandFailed`` when git reports an error;
the messages name the step so the browser shows what went wrong.
"""

from __future__ import annotations

import logging

from ..errors import CommandFailed
from ..workspace import Workspace

logger = logging.getLogger(__name__)

# ``git ls-remote --exit-code`` exits with 2 when no matching ref exists.
_LS_REMOTE_NO_MATCH = 2


def current_branch(workspace: Workspace) -> str:
    """Return the name of the checked-out branch (``HEAD`` when detached)."""
    resp = workspace.git("rev-parse", "--abbrev-ref", "HEAD", action="Get current branch")
    return resp.stdout.strip()


def checkout_reset(workspace: Workspace, branch: str) -> None:
    """Create ``branch`` at the current commit, or reset it there if it exists."""
    workspace.git("checkout", "-B", branch, action=f"Switch to {branch} branch")


def fetch(workspace: Workspace, remote: str) -> None:
    workspace.git("fetch", remote, action=f"Fetch {remote}")


def remote_branch_exists(workspace: Workspace, remote: str, branch: str) -> bool:
    """Return ``True`` if ``remote`` has a head named ``branch``."""
    resp = workspace.git(
        "ls-remote",
        "--exit-code",
        "--heads",
        remote,
        branch,
        action=f"Look up {remote}/{branch}",
        check=False,
    )
    if resp.exit_code == 0:
        return True
    if resp.exit_code == _LS_REMOTE_NO_MATCH:
        return False
    raise CommandFailed(f"Look up {remote}/{branch}", resp)


def merge(workspace: Workspace, ref: str) -> None:
    """Merge ``ref`` into the current branch.

    A failed merge is aborted so the tree is back where it was before the
    merge started, then the original failure is raised.
    """
    resp = workspace.git("merge", "--no-edit", ref, action=f"Merge {ref}", check=False)
    if resp.exit_code == 0:
        return

    abort = workspace.git("merge", "--abort", action="Abort merge", check=False)
    if abort.exit_code == 0:
        logger.info("Aborted failed merge of %s", ref)
    else:
        # Nothing to abort when git refused to start the merge.
        logger.warning("Could not abort merge of %s: %s", ref, abort.output)
    raise CommandFailed(f"Merge {ref}", resp)


def add(workspace: Workspace, path: str) -> None:
    workspace.git("add", "--", path, action=f"Add {path}")


def has_staged_changes(workspace: Workspace) -> bool:
    """Return ``True`` if the index differs from ``HEAD``."""
    resp = workspace.git("diff", "--cached", "--quiet", action="Check staged changes", check=False)
    if resp.exit_code == 0:
        return False
    if resp.exit_code == 1:
        return True
    raise CommandFailed("Check staged changes", resp)


def commit(workspace: Workspace, message: str, author: str | None = None) -> str:
    """Commit the index and return the new commit SHA."""
    argv = ["commit", "-m", message]
    if author:
        argv += ["--author", author]
    workspace.git(*argv, action="Commit")
    sha_resp = workspace.git("rev-parse", "HEAD", action="Read commit SHA")
    return sha_resp.stdout.strip()


def push(workspace: Workspace, remote: str, branch: str) -> None:
    """Push ``branch`` and set it to track ``remote``."""
    workspace.git("push", "-u", remote, branch, action=f"Push {branch} to {remote}")


def diff(workspace: Workspace) -> str:
    """Return the unstaged diff of the working tree."""
    return workspace.git("diff", action="Get git diff").stdout
