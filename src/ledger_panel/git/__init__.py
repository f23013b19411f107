"""Git operations for the accounting repository.

``commands`` parses browser-supplied git commands, ``repo_ops`` wraps the
individual git steps and ``sync`` composes them into the publish flow.
"""

from .commands import CommitCommand, GitCommand, GitSubcommand, parse_git_command
from .sync import PublishResult, PublishStatus, synchronize_and_publish

__all__ = [
    "CommitCommand",
    "GitCommand",
    "GitSubcommand",
    "parse_git_command",
    "PublishResult",
    "PublishStatus",
    "synchronize_and_publish",
]
