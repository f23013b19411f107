"""Limit enforcement for commit messages."""

from __future__ import annotations

from ..constants import COMMIT_MESSAGE_MAX_CHARS, DEFAULT_COMMIT_MESSAGE, TRUNCATION_MARKER


def bound_commit_message(message: str | None, limit: int = COMMIT_MESSAGE_MAX_CHARS) -> str:
    """Return the commit message to use for ``message``.

    Blank messages fall back to the default message.  Messages longer than
    ``limit`` characters are cut to ``limit`` characters and marked with a
    trailing ellipsis so the log shows they were shortened.

    :param message: message supplied by the user, possibly empty
    :param limit: maximum number of characters kept from ``message``
    :return: the message to pass to ``git commit -m``
    """
    text = (message or "").strip()
    if not text:
        return DEFAULT_COMMIT_MESSAGE
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text
