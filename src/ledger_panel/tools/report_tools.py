"""Swipe-statement report tools.

Statements are fetched by an external downloader that writes one file per
day into the reports directory: ``report-YYYY-MM-DD.pdf`` when the bank
had data for that day, ``report-YYYY-MM-DD.no-data`` otherwise.  The panel
only reads those names to work out where the next fetch should start.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path

from ..constants import EARLIEST_REPORT_DATE, REPORT_DATE_FORMAT
from ..errors import CommandRejected
from ..workspace import Workspace

logger = logging.getLogger(__name__)

REPORT_NAME_RE = re.compile(r"^report-(\d{4}-\d{2}-\d{2})\.(?:pdf|no-data)$", re.ASCII)
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_report_date(value: str | None) -> date:
    """Parse a zero-padded ``YYYY-MM-DD`` string.

    :raises CommandRejected: if ``value`` is missing or not a valid date
    """
    if not value:
        raise CommandRejected("Missing date; expected YYYY-MM-DD")
    # strptime alone accepts 2025-6-5 and non-ASCII digits
    if not DATE_RE.fullmatch(value):
        raise CommandRejected(f"Invalid date string: {value!r}; expected YYYY-MM-DD")
    try:
        return datetime.strptime(value, REPORT_DATE_FORMAT).date()
    except ValueError as exc:
        raise CommandRejected(f"Invalid date string: {value!r}; expected YYYY-MM-DD") from exc


def last_report_date(reports_dir: Path) -> date:
    """Return the latest date with a report file under ``reports_dir``.

    Subdirectories are searched too.  Dates before ``EARLIEST_REPORT_DATE``
    are ignored, and ``EARLIEST_REPORT_DATE`` is returned when nothing newer
    exists or the directory is missing.
    """
    latest = EARLIEST_REPORT_DATE
    if not reports_dir.is_dir():
        logger.info("Reports directory %s does not exist", reports_dir)
        return latest

    for path in reports_dir.rglob("report-*"):
        if not path.is_file():
            continue
        match = REPORT_NAME_RE.match(path.name)
        if not match:
            continue
        try:
            found = datetime.strptime(match.group(1), REPORT_DATE_FORMAT).date()
        except ValueError:
            logger.warning("Ignoring report with impossible date: %s", path.name)
            continue
        if found > latest:
            latest = found
    return latest


def list_reports(reports_dir: Path) -> list[str]:
    """Return report paths under ``reports_dir``, newest first.

    Reports in subdirectories are included; each entry is a POSIX path
    relative to ``reports_dir`` such as ``2025/report-2025-03-01.pdf``.
    """
    if not reports_dir.is_dir():
        return []
    found = [
        p for p in reports_dir.rglob("report-*") if p.is_file() and REPORT_NAME_RE.match(p.name)
    ]
    found.sort(key=lambda p: (p.name, p.relative_to(reports_dir).as_posix()), reverse=True)
    return [p.relative_to(reports_dir).as_posix() for p in found]


def resolve_report(reports_dir: Path, name: str) -> Path | None:
    """Return the path of report ``name`` if it is a file under ``reports_dir``.

    ``name`` may contain subdirectories but must not leave ``reports_dir``.
    """
    base = reports_dir.resolve()
    candidate = (base / name).resolve()
    if not candidate.is_relative_to(base) or not candidate.is_file():
        return None
    return candidate


def download_reports(workspace: Workspace, start: date, end: date) -> str:
    """Run the statement downloader for ``start``..``end`` inclusive.

    The downloader runs in the parent of the reports directory and its
    standard output is returned.

    :raises CommandRejected: if ``start`` is after ``end``
    """
    if start > end:
        raise CommandRejected(f"Start date {start} is after end date {end}")

    config = workspace.config
    argv = [
        *config.downloader_command,
        start.strftime(REPORT_DATE_FORMAT),
        end.strftime(REPORT_DATE_FORMAT),
    ]
    logger.info("Downloading reports from %s to %s", start, end)
    resp = workspace.run(
        argv,
        action="Download HBL reports",
        cwd=config.reports_dir.parent,
        timeout_s=config.download_timeout_s,
    )
    return resp.stdout


def fetch_report(workspace: Workspace, day: str | None) -> str:
    """Download the report for a single ``YYYY-MM-DD`` day."""
    parsed = parse_report_date(day)
    return download_reports(workspace, parsed, parsed)


def fetch_latest_reports(workspace: Workspace, today: date | None = None) -> str:
    """Download every report from the last one on disk up to ``today``."""
    start = last_report_date(workspace.config.reports_dir)
    end = today or date.today()
    if start > end:
        start = end
    return download_reports(workspace, start, end)
