from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from auth_service.api.errors import install_error_handlers
from auth_service.api.middleware import register_middleware
from auth_service.api.routes import router
from auth_service.domain.account import Account
from auth_service.domain.contracts import NewAccount
from auth_service.domain.errors import AccountConflictError
from auth_service.domain.service import AuthService, ProfileService
from auth_service.security.passwords import PasswordHasher


class FakeRepository:
    """In-memory repository mimicking the Postgres unique constraints."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self.schema_ready = False

    def ensure_schema(self) -> None:
        self.schema_ready = True

    def find_by_username(self, username: str):
        return self._accounts.get(username)

    def find_by_id(self, account_id: str):
        for account in self._accounts.values():
            if account.account_id == account_id:
                return account
        return None

    def create(self, payload: NewAccount) -> Account:
        if payload.username in self._accounts:
            raise AccountConflictError("username")
        self._check_email(payload.email, owner=None)
        account = Account(
            account_id=str(uuid.uuid4()),
            username=payload.username,
            name=payload.name,
            email=payload.email,
            password_hash=payload.password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self._accounts[account.username] = account
        return account

    def update(self, username: str, *, name=None, email=None, password_hash=None):
        account = self._accounts.get(username)
        if account is None:
            return None
        changes = {}
        if name is not None:
            changes["name"] = name
        if email is not None:
            self._check_email(email, owner=username)
            changes["email"] = email
        if password_hash is not None:
            changes["password_hash"] = password_hash
        updated = replace(account, **changes)
        self._accounts[username] = updated
        return updated

    def delete(self, username: str) -> bool:
        return self._accounts.pop(username, None) is not None

    def _check_email(self, email: str, owner: str | None) -> None:
        for account in self._accounts.values():
            if account.email.lower() == email.lower() and account.username != owner:
                raise AccountConflictError("email")


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def hasher() -> PasswordHasher:
    # minimum bcrypt work factor keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def auth_service(repository, hasher) -> AuthService:
    return AuthService(repository, hasher)


@pytest.fixture
def profile_service(repository, hasher) -> ProfileService:
    return ProfileService(repository, hasher)


@pytest.fixture
def app(auth_service, profile_service) -> FastAPI:
    """Application wired like production, minus Postgres and rate limiting."""
    app = FastAPI()
    install_error_handlers(app)
    register_middleware(app)
    app.include_router(router)
    app.state.auth_service = auth_service
    app.state.profile_service = profile_service
    return app


@pytest.fixture
def api_client(app):
    """Provide a FastAPI test client with isolated state."""
    with TestClient(app) as client:
        yield client
