"""Allowlist enforcement for git commands.

The panel only forwards a fixed set of git subcommands from the browser.
This module centralises the checks on the subcommand and on options that
would let an allowed subcommand write outside the working tree or run
arbitrary programs.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import CommandForbidden

ALLOWED_GIT_SUBCOMMANDS = frozenset(
    {
        "show",
        "status",
        "log",
        "diff",
        "pull",
        "push",
        "add",
        "commit",
        "checkout",
        "branch",
        "reset",
        "merge",
    }
)

# Options rejected regardless of subcommand.  Matched exactly, by any
# abbreviation git's option parser would expand to them, and in the
# ``--flag=value`` form.
BLOCKED_GIT_OPTIONS = (
    "--output",
    "--exec",
    "--upload-pack",
    "--receive-pack",
)


def is_subcommand_allowed(subcommand: str) -> bool:
    """Return ``True`` if ``subcommand`` may be forwarded to git.

    Matching is exact: git subcommands are case-sensitive, so ``Status`` is
    not ``status``.
    """
    return subcommand in ALLOWED_GIT_SUBCOMMANDS


def check_arguments(args: Iterable[str]) -> None:
    """Raise ``CommandForbidden`` if any argument is a blocked option."""
    for arg in args:
        if not arg.startswith("--"):
            continue
        stem = arg.split("=", 1)[0]
        if stem == "--":
            continue
        for option in BLOCKED_GIT_OPTIONS:
            if option.startswith(stem):
                raise CommandForbidden(f"Option '{option}' is not allowed")
