"""Publish ledger edits as a single pull request.

``synchronize_and_publish`` takes the working tree from whatever state it
is in to one open pull request from the working branch carrying the latest
changes to the ledger file:

1. move onto the working branch (creating or resetting it at HEAD);
2. fetch and merge the remote working branch, then the remote main branch,
   when they exist;
3. stage and commit the ledger file if it changed;
4. push the working branch;
5. return the already-open pull request for the branch, or open one.

Nothing is retried.  The first failing step raises ``CommandFailed`` with
git's or gh's output, and the tree is left as the previous step left it,
except for a failed merge, which is aborted before the error propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..constants import MAIN_BRANCH, REMOTE_NAME, TRACKED_FILE, WORKING_BRANCH
from ..errors import CommandRejected
from ..github import pulls
from ..policy.limits import bound_commit_message
from ..workspace import Workspace
from . import repo_ops

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No changes to commit"


class PublishStatus(str, Enum):
    NO_CHANGES = "no_changes"
    CREATED = "created"
    EXISTING = "existing"


@dataclass(frozen=True)
class PublishResult:
    """Outcome of ``synchronize_and_publish``."""

    status: PublishStatus
    pr_url: str | None = None
    commit_message: str | None = None
    commit_sha: str | None = None

    def __str__(self) -> str:
        if self.status is PublishStatus.NO_CHANGES:
            return NO_CHANGES_MESSAGE
        return self.pr_url or ""


def author_from_email(email: str | None) -> str | None:
    """Build a ``Name <email>`` author string from an e-mail address.

    The local part of the address is used as the name.  Returns ``None``
    for a missing or blank address.

    :raises CommandRejected: if the address cannot be embedded safely
    """
    email = (email or "").strip()
    if not email:
        return None
    if any(ch in email for ch in "<>\r\n") or "@" not in email:
        raise CommandRejected(f"Invalid author e-mail: {email!r}")
    name = email.split("@", 1)[0] or email
    return f"{name} <{email}>"


def synchronize_and_publish(
    workspace: Workspace,
    commit_message: str | None = None,
    author_email: str | None = None,
) -> PublishResult:
    """Commit the ledger file on the working branch and publish it as a PR.

    The whole sequence holds the workspace lock.  Calling it again without
    touching the ledger returns ``PublishStatus.NO_CHANGES`` and opens no
    second pull request; calling it after new edits while a PR is already
    open returns that PR.
    """
    author = author_from_email(author_email)
    message = bound_commit_message(commit_message)

    with workspace.exclusive():
        branch = repo_ops.current_branch(workspace)
        if branch != WORKING_BRANCH:
            logger.info("Switching from %s to %s", branch, WORKING_BRANCH)
            repo_ops.checkout_reset(workspace, WORKING_BRANCH)

        repo_ops.fetch(workspace, REMOTE_NAME)
        for upstream in (WORKING_BRANCH, MAIN_BRANCH):
            if repo_ops.remote_branch_exists(workspace, REMOTE_NAME, upstream):
                repo_ops.merge(workspace, f"{REMOTE_NAME}/{upstream}")

        repo_ops.add(workspace, TRACKED_FILE)
        if not repo_ops.has_staged_changes(workspace):
            logger.info("No staged changes to %s", TRACKED_FILE)
            return PublishResult(status=PublishStatus.NO_CHANGES)

        sha = repo_ops.commit(workspace, message, author=author)
        logger.info("Committed %s as %s", TRACKED_FILE, sha[:12])

        repo_ops.push(workspace, REMOTE_NAME, WORKING_BRANCH)

        existing = pulls.find_open_pr(workspace, WORKING_BRANCH)
        if existing:
            logger.info("Reusing open pull request %s", existing)
            return PublishResult(
                status=PublishStatus.EXISTING,
                pr_url=existing,
                commit_message=message,
                commit_sha=sha,
            )

        url = pulls.open_pr(workspace, WORKING_BRANCH)
        return PublishResult(
            status=PublishStatus.CREATED,
            pr_url=url,
            commit_message=message,
            commit_sha=sha,
        )
