"""Configuration loading for Ledger Panel.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.  The object is built once
at startup and handed to every component; nothing reads the environment
after that.

Required variables:
- GIT_REPO_PATH

Optional variables with defaults:
- GIT_REPO_URL (default: '' - no repository link on the index page)
- HBL_REPORTS_DIR (default: '<GIT_REPO_PATH>/hbl-swipe-statements/reports')
- REPORT_DOWNLOADER_CMD (default: 'go run download.go')
- COMMAND_TIMEOUT_S / DOWNLOAD_TIMEOUT_S / LOCK_TIMEOUT_S
- LOG_LEVEL (default: 'INFO')
- GH_TOKEN or GITHUB_TOKEN (only used to redact command output)
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .constants import (
    COMMAND_TIMEOUT_S,
    DEFAULT_DOWNLOADER_COMMAND,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DOWNLOAD_TIMEOUT_S,
    LOCK_TIMEOUT_S,
    REPORTS_SUBDIR,
)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


@dataclass
class Config:
    """Configuration values loaded from the environment."""

    repo_path: Path
    repo_url: str = ""
    reports_dir: Path | None = None
    downloader_command: list[str] = field(
        default_factory=lambda: shlex.split(DEFAULT_DOWNLOADER_COMMAND)
    )
    command_timeout_s: int = COMMAND_TIMEOUT_S
    download_timeout_s: int = DOWNLOAD_TIMEOUT_S
    lock_timeout_s: int = LOCK_TIMEOUT_S
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    github_token: str | None = None

    def __post_init__(self) -> None:
        self.repo_path = Path(self.repo_path)
        if self.reports_dir is None:
            self.reports_dir = self.repo_path / REPORTS_SUBDIR
        else:
            self.reports_dir = Path(self.reports_dir)

    @property
    def secrets(self) -> list[str]:
        """Values that must never appear in logged or returned output."""
        return [self.github_token] if self.github_token else []

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `RuntimeError` if
        required variables are missing or the repository directory does not
        exist, so that the server refuses to start instead of failing on the
        first request.
        """
        load_dotenv()

        raw_path = os.getenv("GIT_REPO_PATH")
        if not raw_path:
            raise RuntimeError("Missing required environment variables: GIT_REPO_PATH")

        repo_path = Path(raw_path).expanduser().resolve()
        if not repo_path.is_dir():
            raise RuntimeError(f"Git repo directory does not exist: {repo_path}")

        reports_dir_str = os.getenv("HBL_REPORTS_DIR")
        reports_dir = Path(reports_dir_str).expanduser() if reports_dir_str else None

        downloader_str = os.getenv("REPORT_DOWNLOADER_CMD", DEFAULT_DOWNLOADER_COMMAND)
        downloader_command = shlex.split(downloader_str)
        if not downloader_command:
            raise RuntimeError("REPORT_DOWNLOADER_CMD must not be empty")

        return cls(
            repo_path=repo_path,
            repo_url=os.getenv("GIT_REPO_URL", "").strip(),
            reports_dir=reports_dir,
            downloader_command=downloader_command,
            command_timeout_s=_int_from_env("COMMAND_TIMEOUT_S", COMMAND_TIMEOUT_S),
            download_timeout_s=_int_from_env("DOWNLOAD_TIMEOUT_S", DOWNLOAD_TIMEOUT_S),
            lock_timeout_s=_int_from_env("LOCK_TIMEOUT_S", LOCK_TIMEOUT_S),
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            github_token=os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or None,
        )
