"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    """Marker for a field the client did not send at all."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def provided(value: Any) -> Any:
    """Map both an omitted and an explicit ``null`` field to ``None``."""
    return None if value is UNSET else value


@dataclass(slots=True)
class LoginInput:
    """Credentials submitted to the login workflow."""

    username: Any = UNSET
    password: Any = UNSET


@dataclass(slots=True)
class RegisterInput:
    """Inputs required to register a new account."""

    username: Any = UNSET
    name: Any = UNSET
    email: Any = UNSET
    password: Any = UNSET


@dataclass(slots=True)
class ProfileUpdateInput:
    """Optional profile fields the owner may change; ``null`` means unchanged."""

    name: Any = UNSET
    email: Any = UNSET
    password: Any = UNSET


@dataclass(slots=True)
class NewAccount:
    """Validated, hashed values ready to be persisted."""

    username: str
    name: str
    email: str
    password_hash: str


def as_target(payload: Any) -> dict[str, Any]:
    """Return the fields of an input contract as sent, explicit ``null`` included."""
    return {
        item.name: getattr(payload, item.name)
        for item in fields(payload)
        if getattr(payload, item.name) is not UNSET
    }
