"""Web interface for Ledger Panel."""

from .app import create_app

__all__ = ["create_app"]
