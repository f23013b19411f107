"""Exception types raised by Ledger Panel operations.

Each class extends the builtin the rest of the code would otherwise raise,
so callers that only care about ``ValueError`` or ``PermissionError`` keep
working.  The web layer maps each class to an HTTP status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .workspace.runner import CommandResult


class CommandRejected(ValueError):
    """A request was malformed and nothing was executed."""


class CommandForbidden(PermissionError):
    """A request asked for a git subcommand or option outside the allowlist."""


class WorkspaceBusy(RuntimeError):
    """The working tree is held by another request."""


class CommandFailed(RuntimeError):
    """An external command exited with a non-zero status."""

    def __init__(self, action: str, result: CommandResult) -> None:
        self.action = action
        self.result = result
        super().__init__(f"{action} failed (exit {result.exit_code}):\n{result.output}")


class CommandTimedOut(CommandFailed):
    """An external command did not finish within its timeout."""

    def __init__(self, action: str, result: CommandResult, timeout_s: int) -> None:
        self.timeout_s = timeout_s
        super().__init__(action, result)
        self.args = (f"{action} timed out after {timeout_s}s",)
