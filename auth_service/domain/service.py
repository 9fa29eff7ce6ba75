"""Account services orchestrating validation, hashing, persistence, and token issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .account import Account
from .contracts import LoginInput, NewAccount, ProfileUpdateInput, RegisterInput, provided
from .errors import AccountConflictError, AccountNotFoundError
from .outcomes import (
    AuthOutcome,
    DuplicateAccount,
    InvalidCredentials,
    Success,
    ValidationFailed,
    duplicate_for,
)
from .validation import validate_login, validate_profile_update, validate_registration
from ..repository import AccountRepository
from ..security.passwords import PasswordHasher
from ..security.tokens import issue_access_token

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AccessToken:
    """Bearer token handed back after a successful login."""

    access_token: str
    expires_in: int
    account: Account


class AuthService:
    """Registration and login workflows."""

    def __init__(self, repository: AccountRepository, hasher: PasswordHasher | None = None) -> None:
        """Store dependencies used to orchestrate persistence and token issuance."""
        self._repository = repository
        self._hasher = hasher or PasswordHasher()

    def register(self, payload: RegisterInput) -> AuthOutcome:
        """Create an account, returning ``Success(account)`` or the failure outcome.

        No token is issued here; clients log in as a separate step.
        """
        violations = validate_registration(payload)
        if violations:
            return ValidationFailed(violations)

        if self._repository.find_by_username(payload.username) is not None:
            logger.warning("registration rejected, username %s already taken", payload.username)
            return DuplicateAccount()

        try:
            account = self._repository.create(
                NewAccount(
                    username=payload.username,
                    name=payload.name,
                    email=payload.email,
                    password_hash=self._hasher.hash(payload.password),
                )
            )
        except AccountConflictError as exc:
            logger.warning("registration rejected, %s already in use", exc.field)
            return duplicate_for(exc.field)

        logger.info("account registered username=%s account_id=%s", account.username, account.account_id)
        return Success(account)

    def login(self, payload: LoginInput) -> AuthOutcome:
        """Check credentials and issue an access token.

        Unknown usernames and wrong passwords produce the same outcome.
        """
        violations = validate_login(payload)
        if violations:
            return ValidationFailed(violations)

        account = self._repository.find_by_username(payload.username)
        if account is None or not self._hasher.verify(payload.password, account.password_hash):
            logger.warning("failed login for username=%s", payload.username)
            return InvalidCredentials()

        token, expires_in = issue_access_token(subject=account.account_id, username=account.username)
        logger.info("login succeeded username=%s", account.username)
        return Success(AccessToken(access_token=token, expires_in=expires_in, account=account))

    def resolve_token_subject(self, account_id: str) -> Account | None:
        """Return the live account a verified token refers to."""
        return self._repository.find_by_id(account_id)


class ProfileService:
    """Profile lookups and owner/administrative changes."""

    def __init__(self, repository: AccountRepository, hasher: PasswordHasher | None = None) -> None:
        self._repository = repository
        self._hasher = hasher or PasswordHasher()

    def get_profile(self, username: str) -> Account | None:
        return self._repository.find_by_username(username)

    def update_profile(self, username: str, payload: ProfileUpdateInput) -> AuthOutcome:
        """Apply the supplied profile fields; an empty update returns the account unchanged."""
        violations = validate_profile_update(payload)
        if violations:
            return ValidationFailed(violations)

        name, email, password = provided(payload.name), provided(payload.email), provided(payload.password)
        if name is None and email is None and password is None:
            account = self._repository.find_by_username(username)
        else:
            password_hash = None
            if password is not None:
                password_hash = self._hasher.hash(password)
            try:
                account = self._repository.update(
                    username,
                    name=name,
                    email=email,
                    password_hash=password_hash,
                )
            except AccountConflictError as exc:
                return duplicate_for(exc.field)

        if account is None:
            raise AccountNotFoundError(username)
        return Success(account)

    def delete_profile(self, username: str) -> bool:
        """Remove an account; ``False`` when no such username exists."""
        deleted = self._repository.delete(username)
        if deleted:
            logger.info("profile deleted username=%s", username)
        return deleted
