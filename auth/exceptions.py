"""
auth/exceptions.py -- Storage failure taxonomy.

The store translates driver/SQLAlchemy errors into these types so callers can
branch on the exception class instead of inspecting error codes or message
text. DuplicateUsernameError is a StorageError: code that only cares about
"storage failed" can catch the base class.
"""

from __future__ import annotations


class StorageError(Exception):
    """The user store could not complete an operation (unavailable, corrupt, unexpected)."""


class DuplicateUsernameError(StorageError):
    """An insert violated the UNIQUE(username) constraint."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already exists: {username!r}")
