"""GitHub pull request operations through the ``gh`` CLI.

``gh`` picks up authentication from its own login or from ``GH_TOKEN``;
this module never handles credentials.  Output is parsed from ``--json``
where ``gh`` offers it.
"""

from __future__ import annotations

import json
import logging

from ..errors import CommandFailed
from ..workspace import Workspace

logger = logging.getLogger(__name__)


def find_open_pr(workspace: Workspace, head_branch: str) -> str | None:
    """Return the URL of the open pull request from ``head_branch``, if any."""
    resp = workspace.gh(
        "pr",
        "list",
        "--head",
        head_branch,
        "--state",
        "open",
        "--json",
        "url",
        action="Check for existing PR",
    )
    try:
        items = json.loads(resp.stdout or "[]")
    except json.JSONDecodeError as exc:
        raise CommandFailed("Check for existing PR", resp) from exc

    for item in items:
        url = (item or {}).get("url")
        if url:
            return url
    return None


def open_pr(workspace: Workspace, head_branch: str) -> str:
    """Open a pull request from ``head_branch`` and return its URL.

    Title and body are filled from the branch's commits (``--fill``).
    """
    resp = workspace.gh("pr", "create", "--fill", "--head", head_branch, action="Create PR")
    url = _last_url(resp.stdout)
    if url is None:
        raise CommandFailed("Create PR", resp)
    logger.info("Opened pull request %s", url)
    return url


def _last_url(text: str) -> str | None:
    """Return the last line of ``text`` that looks like a URL.

    ``gh pr create`` prints progress lines before the URL of the new PR.
    """
    for line in reversed(text.splitlines()):
        line = line.strip()
        if line.startswith(("https://", "http://")):
            return line
    return None
