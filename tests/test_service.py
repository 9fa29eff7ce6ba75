from __future__ import annotations

import pytest

from auth_service.domain.contracts import LoginInput, ProfileUpdateInput, RegisterInput
from auth_service.domain.errors import AccountNotFoundError
from auth_service.domain.outcomes import (
    DUPLICATE_EMAIL_MESSAGE,
    DUPLICATE_USERNAME_MESSAGE,
    WRONG_LOGIN_MESSAGE,
    DuplicateAccount,
    InvalidCredentials,
    Success,
    ValidationFailed,
)
from auth_service.domain.service import AccessToken
from auth_service.security.tokens import decode_access_token


def _register(service, username="alice", email="alice@gmail.com", password="wonderland"):
    return service.register(
        RegisterInput(username=username, name="Alice Liddell", email=email, password=password)
    )


def test_register_stores_hashed_password(auth_service, repository):
    outcome = _register(auth_service)

    assert isinstance(outcome, Success)
    account = outcome.value
    assert account.username == "alice"
    stored = repository.find_by_username("alice")
    assert stored is not None
    assert stored.password_hash != "wonderland"
    assert stored.password_hash.startswith("$2")


def test_register_rejects_taken_username(auth_service):
    _register(auth_service)
    outcome = _register(auth_service, email="other@gmail.com", password="123456789")

    assert outcome == DuplicateAccount(DUPLICATE_USERNAME_MESSAGE)


def test_register_rejects_taken_email(auth_service):
    _register(auth_service)
    outcome = _register(auth_service, username="bob", email="ALICE@gmail.com")

    assert outcome == DuplicateAccount(DUPLICATE_EMAIL_MESSAGE)


def test_register_returns_violations_unchanged(auth_service, repository):
    outcome = _register(auth_service, username="alice99", password="short")

    assert isinstance(outcome, ValidationFailed)
    assert [v.property for v in outcome.violations] == ["username", "password"]
    assert repository.find_by_username("alice99") is None


def test_login_issues_token_for_account(auth_service):
    account = _register(auth_service).value
    outcome = auth_service.login(LoginInput(username="alice", password="wonderland"))

    assert isinstance(outcome, Success)
    token = outcome.value
    assert isinstance(token, AccessToken)
    assert token.account.account_id == account.account_id
    assert decode_access_token(token.access_token)["sub"] == account.account_id


def test_login_failures_are_indistinguishable(auth_service):
    unknown = auth_service.login(LoginInput(username="alice", password="wonderland"))
    _register(auth_service)
    wrong_password = auth_service.login(LoginInput(username="alice", password="wrongpassword"))

    assert unknown == wrong_password == InvalidCredentials(WRONG_LOGIN_MESSAGE)


def test_login_validates_before_lookup(auth_service):
    outcome = auth_service.login(LoginInput(username="alice", password="123"))
    assert isinstance(outcome, ValidationFailed)


def test_resolve_token_subject_follows_deletion(auth_service, profile_service):
    account = _register(auth_service).value
    assert auth_service.resolve_token_subject(account.account_id) == account

    assert profile_service.delete_profile("alice")
    assert auth_service.resolve_token_subject(account.account_id) is None


def test_update_profile_rehashes_password(auth_service, profile_service):
    _register(auth_service)
    outcome = profile_service.update_profile(
        "alice", ProfileUpdateInput(name="Alice L.", password="throughtheglass")
    )

    assert isinstance(outcome, Success)
    assert outcome.value.name == "Alice L."
    assert isinstance(auth_service.login(LoginInput(username="alice", password="wonderland")), InvalidCredentials)
    assert isinstance(auth_service.login(LoginInput(username="alice", password="throughtheglass")), Success)


def test_update_profile_rejects_email_of_other_account(auth_service, profile_service):
    _register(auth_service)
    _register(auth_service, username="bob", email="bob@gmail.com")

    outcome = profile_service.update_profile("bob", ProfileUpdateInput(email="alice@gmail.com"))
    assert outcome == DuplicateAccount(DUPLICATE_EMAIL_MESSAGE)


def test_empty_update_returns_account_unchanged(auth_service, profile_service):
    account = _register(auth_service).value
    outcome = profile_service.update_profile("alice", ProfileUpdateInput())
    assert outcome == Success(account)


def test_update_unknown_profile_raises(profile_service):
    with pytest.raises(AccountNotFoundError):
        profile_service.update_profile("ghost", ProfileUpdateInput(name="Ghost"))


def test_delete_profile_reports_missing_username(profile_service):
    assert profile_service.delete_profile("ghost") is False
