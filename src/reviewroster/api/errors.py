"""Mapping of core errors to HTTP responses.

This is the only place that knows which status code a core error becomes.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import (
    ConflictError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    ReviewRosterError,
    TeamExistsError,
)

logger = logging.getLogger(__name__)

# Most specific class first
_STATUS_BY_ERROR: list[tuple[type[ReviewRosterError], int]] = [
    (TeamExistsError, 400),
    (InvalidInputError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InternalError, 500),
]


def status_for(error: ReviewRosterError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def register_exception_handlers(app: FastAPI) -> None:
    """Register JSON error handlers producing ``{"error": {code, message}}``."""

    @app.exception_handler(ReviewRosterError)
    async def review_roster_error_handler(request: Request, exc: ReviewRosterError):
        status_code = status_for(exc)
        level = logging.ERROR if status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s %s: %s",
            request.method,
            request.url.path,
            status_code,
            exc.code,
            exc.message,
        )
        return JSONResponse(status_code=status_code, content=error_body(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "%s %s -> 400 invalid request: %s", request.method, request.url.path, exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content=error_body(InvalidInputError.code, InvalidInputError.default_message),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # Full traceback to server logs; generic message to client
        logger.exception("Unhandled exception %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body(InternalError.code, InternalError.default_message),
        )
