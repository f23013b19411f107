"""Working tree access and command execution."""

from .runner import CommandResult, CommandRunner, SubprocessRunner
from .workspace import Workspace

__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner", "Workspace"]
