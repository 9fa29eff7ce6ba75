"""Password hashing and verification backed by bcrypt."""

from __future__ import annotations

import base64
import hashlib

import bcrypt

from ..config import get_settings


def _prehash(password: str) -> bytes:
    """Fold a password of any length into 44 bytes, under bcrypt's 72 byte input limit."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


class PasswordHasher:
    """One-way bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds if rounds is not None else get_settings().bcrypt_rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password (auto-salted)."""
        return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison of ``password`` against a stored bcrypt hash."""
        try:
            return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False
