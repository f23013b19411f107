"""The accounting repository working tree.

A ``Workspace`` wraps the single checked-out repository the panel drives.
Every external program (git, gh, bean-query, the statement downloader) is
launched through it so that timeouts, secret redaction, logging and
failure reporting are applied in one place.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from ..config import Config
from ..errors import CommandFailed, CommandTimedOut, WorkspaceBusy
from ..policy.redaction import redact_secrets
from .runner import CommandResult, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class Workspace:
    """Run commands inside the configured repository.

    The working tree and the checked-out branch are shared by every
    request, so multi-step mutations must run inside ``exclusive()``.
    """

    def __init__(self, config: Config, runner: CommandRunner | None = None) -> None:
        self.config = config
        self.runner: CommandRunner = runner or SubprocessRunner()
        # Single working tree lock - one mutating sequence at a time
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self.config.repo_path

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the working tree for the duration of the ``with`` block.

        Waits up to ``config.lock_timeout_s`` seconds for another holder to
        finish and raises ``WorkspaceBusy`` otherwise.  The lock is released
        on every exit path, including exceptions.
        """
        if not self._lock.acquire(timeout=self.config.lock_timeout_s):
            raise WorkspaceBusy(
                "Another repository operation is in progress; try again shortly"
            )
        try:
            yield
        finally:
            self._lock.release()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def run(
        self,
        argv: Sequence[str],
        *,
        action: str | None = None,
        cwd: Path | None = None,
        timeout_s: int | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Execute ``argv`` and return its redacted result.

        A timeout always raises ``CommandTimedOut``.  A non-zero exit raises
        ``CommandFailed`` when ``check`` is true; callers that interpret exit
        codes themselves (``git diff --quiet``, ``git ls-remote
        --exit-code``) pass ``check=False``.
        """
        argv = list(argv)
        action = action or " ".join(argv[:2])
        timeout_s = timeout_s or self.config.command_timeout_s
        workdir = cwd or self.path

        raw = self.runner.run(argv, workdir, timeout_s)

        secrets = self.config.secrets
        result = CommandResult(
            argv=tuple(argv),
            exit_code=raw.exit_code,
            stdout=redact_secrets(raw.stdout, secrets),
            stderr=redact_secrets(raw.stderr, secrets),
            duration_ms=raw.duration_ms,
            timed_out=raw.timed_out,
        )

        logger.debug(
            "ran %s in %s: exit=%d duration_ms=%d",
            redact_secrets(" ".join(argv), secrets),
            workdir,
            result.exit_code,
            result.duration_ms,
        )

        if result.timed_out:
            logger.warning("%s timed out after %ss", action, timeout_s)
            raise CommandTimedOut(action, result, timeout_s)
        if check and result.exit_code != 0:
            logger.warning("%s failed with exit %d: %s", action, result.exit_code, result.output)
            raise CommandFailed(action, result)
        return result

    def git(self, *args: str, action: str | None = None, check: bool = True) -> CommandResult:
        """Run ``git <args>`` in the repository."""
        return self.run(["git", *args], action=action or f"git {args[0]}", check=check)

    def gh(self, *args: str, action: str | None = None, check: bool = True) -> CommandResult:
        """Run the GitHub CLI in the repository."""
        return self.run(["gh", *args], action=action or f"gh {' '.join(args[:2])}", check=check)
