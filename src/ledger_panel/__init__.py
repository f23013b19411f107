"""Top‑level package for Ledger Panel.

This package exposes a small local web control panel for a personal
accounting git repository: git passthrough, ledger queries, statement
downloads and pull request publishing.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
