"""FastAPI dependencies resolving services and the authenticated account."""

from __future__ import annotations

import logging

import jwt
from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..domain.account import Account
from ..domain.service import AuthService, ProfileService
from ..security.tokens import decode_access_token
from .errors import ApiError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Resolve the `AuthService` stored on the FastAPI application state."""
    service: AuthService = request.app.state.auth_service
    return service


def get_profile_service(request: Request) -> ProfileService:
    """Resolve the `ProfileService` stored on the FastAPI application state."""
    service: ProfileService = request.app.state.profile_service
    return service


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Account:
    """Verify the bearer token and return the account it was issued to.

    Any failure, including a token for an account that has since been
    deleted, yields a bare 401.
    """
    if credentials is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED)
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        logger.debug("rejected bearer token: %s", exc)
        raise ApiError(status.HTTP_401_UNAUTHORIZED) from exc

    account = service.resolve_token_subject(str(claims["sub"]))
    if account is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED)
    return account
