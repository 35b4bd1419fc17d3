"""
Exception handlers.

Maps the exception hierarchy in ``shared.exceptions`` to HTTP responses.
Upstream errors are relayed with the remote status and body unchanged.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    ServiceUnavailableError,
    UpstreamError,
    ValidationError,
    ZamarError,
)
from shared.messages import get_message

from ..models.errors import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: list[tuple[type[ZamarError], int]] = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ServiceUnavailableError, 503),
]


def error_response(status_code: int, message: str, code: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def zamar_error_handler(request: Request, exc: ZamarError) -> JSONResponse:
    """Translate a ZamarError into its HTTP response."""
    if isinstance(exc, UpstreamError):
        return JSONResponse(status_code=exc.status_code, content=exc.body)

    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content=exc.to_dict())

    if isinstance(exc, ExternalServiceError):
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message} ({exc.service})"
        )
        return error_response(500, get_message("internal_error"), exc.code)

    logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(status_code=500, content=exc.to_dict())


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Return malformed request bodies as 400s."""
    body = ValidationErrorResponse(detail=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: generic localized 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, get_message("internal_error"), "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the API's exception handlers."""
    app.add_exception_handler(ZamarError, zamar_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
