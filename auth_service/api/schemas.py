"""Request and response models for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..domain.account import Account
from ..domain.contracts import LoginInput, ProfileUpdateInput, RegisterInput
from ..domain.service import AccessToken


class LoginRequest(BaseModel):
    """Credentials posted to ``/api/auth/login``.

    Fields are left untyped so the credential validator can report type
    problems itself, alongside the other rule violations. Only fields present
    in the body reach the domain input, so an explicit ``null`` stays visible.
    """

    username: Any = Field(default=None, description="Letters only", examples=["alice"])
    password: Any = Field(default=None, description="At least 8 characters", examples=["correcthorse"])

    def to_domain(self) -> LoginInput:
        return LoginInput(**self.model_dump(include=self.model_fields_set))


class RegisterRequest(BaseModel):
    """Payload posted to ``/api/auth/register``."""

    username: Any = Field(default=None, description="Letters only", examples=["alice"])
    name: Any = Field(default=None, examples=["Alice Liddell"])
    email: Any = Field(default=None, examples=["alice@gmail.com"])
    password: Any = Field(default=None, description="At least 8 characters", examples=["correcthorse"])

    def to_domain(self) -> RegisterInput:
        return RegisterInput(**self.model_dump(include=self.model_fields_set))


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    name: Any = Field(default=None, examples=["Alice Liddell"])
    email: Any = Field(default=None, examples=["alice@gmail.com"])
    password: Any = Field(default=None, description="At least 8 characters")

    def to_domain(self) -> ProfileUpdateInput:
        return ProfileUpdateInput(**self.model_dump(include=self.model_fields_set))


class ProfileResponse(BaseModel):
    """Public representation of an account; never includes the password hash."""

    account_id: str
    username: str
    name: str
    email: str
    avatar: str
    created_at: str

    @classmethod
    def from_domain(cls, account: Account) -> "ProfileResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            account_id=account.account_id,
            username=account.username,
            name=account.name,
            email=account.email,
            avatar=account.avatar,
            created_at=account.created_at.isoformat(),
        )


class TokenResponse(BaseModel):
    """Login response containing the bearer token and the account it belongs to."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: ProfileResponse

    @classmethod
    def from_domain(cls, token: AccessToken) -> "TokenResponse":
        return cls(
            access_token=token.access_token,
            expires_in=token.expires_in,
            user=ProfileResponse.from_domain(token.account),
        )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Documented shape of error bodies."""

    statusCode: int
    error: str
    message: Any = None
