"""Global constants for Ledger Panel.

These values name the fixed parts of the accounting repository layout and
serve as defaults for configuration.  Anything that differs between
machines belongs in the environment and is read by ``config.Config``.
"""

from datetime import date

# Repository layout
WORKING_BRANCH = "edit"
MAIN_BRANCH = "main"
REMOTE_NAME = "origin"
TRACKED_FILE = "main.bean"

# Commits
DEFAULT_COMMIT_MESSAGE = "Add data"
COMMIT_MESSAGE_MAX_CHARS = 300
TRUNCATION_MARKER = "…"
AUTHOR_EMAIL_HEADER = "Cf-Access-Authenticated-User-Email"

# Reports
REPORTS_SUBDIR = "hbl-swipe-statements/reports"
DEFAULT_DOWNLOADER_COMMAND = "go run download.go"
EARLIEST_REPORT_DATE = date(2025, 1, 1)
REPORT_DATE_FORMAT = "%Y-%m-%d"

# Limits
COMMAND_TIMEOUT_S = 120
DOWNLOAD_TIMEOUT_S = 600
LOCK_TIMEOUT_S = 30

# Transport
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7001

# Logging
DEFAULT_LOG_LEVEL = "INFO"
