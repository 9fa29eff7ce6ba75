"""Exceptions raised by the account domain and its storage layer."""

from __future__ import annotations


class AccountConflictError(Exception):
    """Raised when a write would break username or email uniqueness."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} already in use")
        self.field = field


class AccountNotFoundError(LookupError):
    """Raised when an operation targets a username with no account."""

    def __init__(self, username: str) -> None:
        super().__init__(f"account {username!r} not found")
        self.username = username
