"""Ledger query tool.

Queries are handed verbatim to ``bean-query`` against the tracked ledger
file; the panel does not interpret the query language.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import TRACKED_FILE
from ..errors import CommandRejected
from ..workspace import Workspace


@dataclass(frozen=True)
class SavedQuery:
    """A query offered as a shortcut on the index page."""

    name: str
    query: str


SAVED_QUERIES: tuple[SavedQuery, ...] = (
    SavedQuery(
        name="Positive incomes",
        query=(
            'select date, lineno, account, narration, position where account ~ "Income" '
            'and narration !~ "refund" and narration !~ "intended positive" and number > 0'
        ),
    ),
    SavedQuery(
        name="Missing bank charges for HBL income",
        query=(
            'select date, lineno, account, position, narration where has_account("Assets:Bank:HBL") '
            'and has_account("Income") and account = "Assets:Bank:HBL" '
            'and not has_account("Expenses:BankCharge") and flag = "*"'
        ),
    ),
    SavedQuery(
        name="Room and restaurant income by month",
        query=(
            "SELECT\n"
            "    YEAR(date) AS year,\n"
            "    MONTH(date) AS month,\n"
            "    account,\n"
            "    SUM(position) AS total\n"
            "WHERE\n"
            '    account ~ "Income:Room" OR account ~ "Income:Restaurant"\n'
            "GROUP BY\n"
            "    year, month, account\n"
            "ORDER BY\n"
            "    year ASC, month ASC, account ASC"
        ),
    ),
)


def run_bean_query(workspace: Workspace, query: str) -> str:
    """Run ``bean-query`` on the ledger and return its text output.

    :raises CommandRejected: if ``query`` is blank
    :raises CommandFailed: if bean-query exits non-zero
    """
    query = (query or "").strip()
    if not query:
        raise CommandRejected("Query must not be empty")
    resp = workspace.run(["bean-query", TRACKED_FILE, query], action="bean-query")
    return resp.stdout
