"""Typed git commands accepted from the browser.

Requests arrive as a list of string tokens.  ``parse_git_command`` turns
them into one of a closed set of command types before anything is run, so
the rest of the code never handles a free-form argument array.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ..errors import CommandForbidden, CommandRejected
from ..policy.allowlist import check_arguments, is_subcommand_allowed


class GitSubcommand(str, Enum):
    SHOW = "show"
    STATUS = "status"
    LOG = "log"
    DIFF = "diff"
    PULL = "pull"
    PUSH = "push"
    ADD = "add"
    COMMIT = "commit"
    CHECKOUT = "checkout"
    BRANCH = "branch"
    RESET = "reset"
    MERGE = "merge"


@dataclass(frozen=True)
class GitCommand:
    """Any allowed subcommand other than ``commit``, with its arguments."""

    subcommand: GitSubcommand
    args: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        return [self.subcommand.value, *self.args]


@dataclass(frozen=True)
class CommitCommand:
    """``git commit -m <message>``; the only accepted commit form."""

    message: str

    @property
    def subcommand(self) -> GitSubcommand:
        return GitSubcommand.COMMIT

    def argv(self) -> list[str]:
        return ["commit", "-m", self.message]


ParsedGitCommand = GitCommand | CommitCommand


def parse_git_command(tokens: Sequence[str]) -> ParsedGitCommand:
    """Validate ``tokens`` and return the matching command.

    :raises CommandRejected: empty command or malformed commit
    :raises CommandForbidden: subcommand outside the allowlist, or a blocked
        option among the arguments
    """
    if not tokens:
        raise CommandRejected("Empty command")

    base, *rest = tokens
    if not is_subcommand_allowed(base):
        raise CommandForbidden(f"Forbidden command: {base}")
    check_arguments(rest)

    subcommand = GitSubcommand(base)
    if subcommand is GitSubcommand.COMMIT:
        if len(rest) < 2 or rest[0] != "-m":
            raise CommandRejected('Invalid commit format. Use: commit -m "message"')
        message = " ".join(rest[1:]).strip()
        if not message:
            raise CommandRejected("Commit message must not be empty")
        return CommitCommand(message=message)

    return GitCommand(subcommand=subcommand, args=tuple(rest))
