"""API error types, error envelope translation and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.error import ErrorItem
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class APIError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(self, *, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFoundError(APIError):
    """Raised when an entity or resource does not exist."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, message=message)


class BadRequestError(APIError):
    """Raised when the request cannot be read at all (e.g. malformed JSON)."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message=message)


class ValidationError(APIError):
    """Raised when request input fails one or more validation rules."""

    def __init__(self, errors: Sequence[ErrorItem]) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message="Validation error")
        self.errors = list(errors)


class SchemaDefinitionError(RuntimeError):
    """Raised for a broken validation schema. This is a deployment defect, not bad input."""


def handle_error(error: BaseException) -> tuple[int, dict[str, Any]]:
    """Translate an exception into an HTTP status code and error envelope."""
    if isinstance(error, ValidationError):
        payload = ErrorResponse(errors=error.errors)
        return status.HTTP_400_BAD_REQUEST, payload.model_dump(exclude_none=True)

    code = getattr(error, "status_code", None) or status.HTTP_500_INTERNAL_SERVER_ERROR
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = INTERNAL_ERROR_MESSAGE
    elif isinstance(error, APIError):
        message = error.message
    else:
        message = str(error) or INTERNAL_ERROR_MESSAGE
    payload = ErrorResponse(errors=[ErrorItem(code=code, message=message)])
    return code, payload.model_dump(exclude_none=True)


def _error_response(error: BaseException) -> JSONResponse:
    status_code, payload = handle_error(error)
    return JSONResponse(status_code=status_code, content=payload)


def _request_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    """Return domain errors raised outside a wrapped endpoint in the shared envelope."""
    return _error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Report unknown routes as not found; pass other HTTP errors through."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        error: APIError = NotFoundError(f"URI {request.method} {_request_url(request)} does not exist.")
    else:
        message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
        error = APIError(status_code=exc.status_code, message=message)
    return _error_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Keep the response shape stable for anything that escaped a wrapped endpoint."""
    logger.error("Unhandled error for %s %s", request.method, _request_url(request), exc_info=exc)
    return _error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
