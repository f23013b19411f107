"""Policy utilities for Ledger Panel."""

from .allowlist import ALLOWED_GIT_SUBCOMMANDS, check_arguments, is_subcommand_allowed
from .limits import bound_commit_message
from .redaction import redact_secrets

__all__ = [
    "ALLOWED_GIT_SUBCOMMANDS",
    "check_arguments",
    "is_subcommand_allowed",
    "bound_commit_message",
    "redact_secrets",
]
