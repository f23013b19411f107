"""GitHub integration via the gh CLI."""

from .pulls import find_open_pr, open_pr

__all__ = [
    "find_open_pr",
    "open_pr",
]
