"""Command runners.

This module defines the runner abstraction used by ``Workspace`` to execute
external programs (git, gh, bean-query and the statement downloader).  A
runner hides how a command is launched; callers only see a
``CommandResult``.

In production, only ``SubprocessRunner`` is used.  For testing, a
FakeRunner is available in tests/conftest.py.
"""

from __future__ import annotations

import os
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

# Exit codes reported when the process could not produce one itself,
# following the shell convention.
TIMEOUT_EXIT_CODE = 124
NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external command."""

    argv: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Captured output for error reports, stderr first."""
        parts = [p.strip("\n") for p in (self.stderr, self.stdout) if p and p.strip()]
        return "\n".join(parts)


class CommandRunner(Protocol):
    """Interface for a command runner.

    Implementations must run ``argv`` to completion in ``cwd`` and never
    raise for a failing command; failures are reported through the
    ``exit_code`` and ``timed_out`` fields of the result.
    """

    def run(self, argv: Sequence[str], cwd: Path, timeout_s: int) -> CommandResult:
        ...


class SubprocessRunner:
    """Runner that executes commands locally with ``subprocess.run``.

    Commands are passed as argument lists (``shell=False``) and git is told
    never to prompt on the terminal, which would otherwise hang a request.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self.env = env

    def _prepare_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        # gh must not open a pager or prompt interactively
        env["GH_PROMPT_DISABLED"] = "1"
        env["GH_PAGER"] = "cat"
        env["GIT_PAGER"] = "cat"
        if self.env:
            env.update(self.env)
        return env

    def run(self, argv: Sequence[str], cwd: Path, timeout_s: int) -> CommandResult:
        """Run a command and capture its output."""
        timed_out = False
        start_ns = time.time_ns()

        # subprocess reports a missing cwd as FileNotFoundError too
        if not Path(cwd).is_dir():
            return CommandResult(
                argv=tuple(argv),
                exit_code=NOT_FOUND_EXIT_CODE,
                stderr=f"working directory does not exist: {cwd}",
            )

        try:
            proc = subprocess.run(
                list(argv),
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                shell=False,
                timeout=timeout_s,
                text=True,
                env=self._prepare_env(),
            )
            stdout = proc.stdout or ""
            stderr = proc.stderr or ""
            exit_code = proc.returncode
        except subprocess.TimeoutExpired as exc:
            timed_out = True
            stdout = _decode(exc.stdout)
            stderr = _decode(exc.stderr) or "Command timed out"
            exit_code = TIMEOUT_EXIT_CODE
        except FileNotFoundError:
            stdout = ""
            stderr = f"{argv[0]}: command not found"
            exit_code = NOT_FOUND_EXIT_CODE
        except OSError as exc:
            stdout = ""
            stderr = str(exc)
            exit_code = 1

        duration_ms = int((time.time_ns() - start_ns) / 1_000_000)

        return CommandResult(
            argv=tuple(argv),
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
