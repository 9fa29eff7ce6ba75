"""HTTP route definitions for the auth service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..domain.account import Account
from ..domain.errors import AccountNotFoundError
from ..domain.outcomes import AuthOutcome, DuplicateAccount, InvalidCredentials, Success, ValidationFailed
from ..domain.service import AuthService, ProfileService
from .dependencies import get_auth_service, get_current_account, get_profile_service
from .errors import ApiError
from .schemas import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
)

_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}
_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
_NOT_ACCEPTABLE = {status.HTTP_406_NOT_ACCEPTABLE: {"model": ErrorResponse}}

router = APIRouter()
auth_router = APIRouter(prefix="/api/auth", tags=["authentication"])
profile_router = APIRouter(prefix="/api/profile", tags=["profile"])


def _unwrap(outcome: AuthOutcome):
    """Return the value of a successful outcome or raise the matching HTTP error."""
    if isinstance(outcome, Success):
        return outcome.value
    if isinstance(outcome, ValidationFailed):
        raise ApiError(status.HTTP_400_BAD_REQUEST, [v.to_dict() for v in outcome.violations])
    if isinstance(outcome, InvalidCredentials):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, outcome.message)
    if isinstance(outcome, DuplicateAccount):
        raise ApiError(status.HTTP_406_NOT_ACCEPTABLE, outcome.message)
    raise TypeError(f"unexpected outcome {outcome!r}")


@router.get("/", response_model=ProfileResponse, tags=["app"], responses=_UNAUTHORIZED)
def whoami(account: Account = Depends(get_current_account)) -> ProfileResponse:
    """Return the profile of the authenticated caller."""
    return ProfileResponse.from_domain(account)


@auth_router.post(
    "/register",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_NOT_ACCEPTABLE},
)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    """Register a new account. Log in afterwards to obtain a token."""
    account = _unwrap(service.register(payload.to_domain()))
    return ProfileResponse.from_domain(account)


@auth_router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED},
)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange a username/password pair for a bearer token."""
    token = _unwrap(service.login(payload.to_domain()))
    return TokenResponse.from_domain(token)


@profile_router.get("/{username}", response_model=ProfileResponse, responses={**_UNAUTHORIZED, **_NOT_FOUND})
def get_profile(
    username: str,
    _: Account = Depends(get_current_account),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Look up another account's public profile."""
    account = service.get_profile(username)
    if account is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, f"The profile with username {username} was not found.")
    return ProfileResponse.from_domain(account)


@profile_router.patch(
    "",
    response_model=ProfileResponse,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED, **_NOT_ACCEPTABLE},
)
def update_profile(
    payload: ProfileUpdateRequest,
    account: Account = Depends(get_current_account),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Change the caller's name, email or password."""
    try:
        outcome = service.update_profile(account.username, payload.to_domain())
    except AccountNotFoundError as exc:
        # deleted between token check and update
        raise ApiError(status.HTTP_401_UNAUTHORIZED) from exc
    return ProfileResponse.from_domain(_unwrap(outcome))


@profile_router.delete("/{username}", response_model=MessageResponse, responses=_NOT_FOUND)
def delete_profile(
    username: str,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Remove an account by username."""
    if not service.delete_profile(username):
        raise ApiError(status.HTTP_404_NOT_FOUND, f"The profile with username {username} was not found.")
    return MessageResponse(message=f"Deleted {username} from records")


router.include_router(auth_router)
router.include_router(profile_router)
