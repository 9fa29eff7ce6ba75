"""Tagged results returned by the authentication workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from .validation import Violation

T = TypeVar("T")

WRONG_LOGIN_MESSAGE = "Wrong login combination!"
DUPLICATE_USERNAME_MESSAGE = (
    "The account with the provided username currently exists. Please choose another one."
)
DUPLICATE_EMAIL_MESSAGE = (
    "The account with the provided email currently exists. Please choose another one."
)


@dataclass(slots=True)
class Success(Generic[T]):
    value: T


@dataclass(slots=True)
class InvalidCredentials:
    message: str = WRONG_LOGIN_MESSAGE


@dataclass(slots=True)
class ValidationFailed:
    violations: list[Violation] = field(default_factory=list)


@dataclass(slots=True)
class DuplicateAccount:
    message: str = DUPLICATE_USERNAME_MESSAGE


AuthOutcome = Union[Success[Any], InvalidCredentials, ValidationFailed, DuplicateAccount]


def duplicate_for(field_name: str) -> DuplicateAccount:
    """Build the conflict outcome for the column that clashed."""
    if field_name == "email":
        return DuplicateAccount(DUPLICATE_EMAIL_MESSAGE)
    return DuplicateAccount(DUPLICATE_USERNAME_MESSAGE)
