"""Tool module exports for Ledger Panel.

This package provides submodules for each group of operations exposed by
the web panel.  Each submodule exposes functions that take the
``Workspace`` plus request values and return text for the response.

Usage:

    from ledger_panel.tools import git_tools
    git_tools.run_git_command(workspace, ["status"])

The web layer imports these modules and dispatches requests accordingly.
"""

from . import (
    git_tools,  # noqa: F401
    ledger_tools,  # noqa: F401
    report_tools,  # noqa: F401
)

__all__ = [
    "git_tools",
    "ledger_tools",
    "report_tools",
]
