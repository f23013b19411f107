"""Git tool implementations.

These are the operations behind the git endpoints: forwarding an allowed
git command typed into the panel, showing the working tree diff, and
publishing ledger edits as a pull request.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..git import repo_ops
from ..git.commands import parse_git_command
from ..git.sync import PublishResult, synchronize_and_publish
from ..workspace import Workspace

logger = logging.getLogger(__name__)


def run_git_command(workspace: Workspace, tokens: Sequence[str]) -> str:
    """Run an allowlisted git command and return its standard output.

    The tokens are parsed before the workspace is touched, so rejected
    commands never reach git.  Allowed commands hold the workspace lock
    because several of them (checkout, reset, merge) move the shared branch.
    """
    command = parse_git_command(tokens)
    logger.info("Running git %s", command.subcommand.value)
    with workspace.exclusive():
        resp = workspace.git(*command.argv(), action=f"git {command.subcommand.value}")
    return resp.stdout


def git_diff(workspace: Workspace) -> str:
    """Return ``git diff`` of the working tree."""
    return repo_ops.diff(workspace)


def create_pr_with_edits(
    workspace: Workspace,
    commit_message: str | None = None,
    author_email: str | None = None,
) -> PublishResult:
    """Commit the ledger and open or reuse the pull request for it."""
    return synchronize_and_publish(workspace, commit_message, author_email)
