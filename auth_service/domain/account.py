from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime

GRAVATAR_URL = "https://www.gravatar.com/avatar/{digest}?d=retro"


@dataclass(slots=True)
class Account:
    """Aggregate root for a registered user identity."""

    account_id: str
    username: str
    name: str
    email: str
    password_hash: str
    created_at: datetime

    @property
    def avatar(self) -> str:
        """Gravatar URL derived from the account email."""
        digest = hashlib.md5(self.email.strip().lower().encode("utf-8")).hexdigest()
        return GRAVATAR_URL.format(digest=digest)
