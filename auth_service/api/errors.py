"""Error envelope shared by every failing response.

Bodies follow ``{"statusCode": int, "error": reason phrase, "message": ...}``;
``message`` is left out when there is nothing to add to the reason phrase.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

_UNSET: Any = object()


class ApiError(Exception):
    """An HTTP failure rendered with the standard error envelope."""

    def __init__(self, status_code: int, message: Any = _UNSET, headers: dict[str, str] | None = None) -> None:
        super().__init__(HTTPStatus(status_code).phrase)
        self.status_code = status_code
        self.message = message
        self.headers = headers


def error_body(status_code: int, message: Any = _UNSET) -> dict[str, Any]:
    body: dict[str, Any] = {
        "statusCode": status_code,
        "error": HTTPStatus(status_code).phrase,
    }
    if message is not _UNSET and message is not None:
        body["message"] = message
    return body


def error_response(status_code: int, message: Any = _UNSET, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(status_code, message), headers=headers)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.headers)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if message == HTTPStatus(exc.status_code).phrase:
        message = _UNSET
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # body could not be parsed into the request model at all
    messages = [error.get("msg", "invalid request") for error in exc.errors()]
    return error_response(status.HTTP_400_BAD_REQUEST, messages)


def install_error_handlers(app: FastAPI) -> None:
    """Route every handled failure through the shared envelope."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
