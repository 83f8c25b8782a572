"""Map domain errors and framework errors to JSON responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from squid_registration.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ShuttingDownError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": exc.details},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    details = [
        {"field": str(err["loc"][-1]) if err["loc"] else "body", "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400, content={"error": "Validation failed", "details": details}
    )


async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(
        status_code=401,
        content={"error": "Unauthorized"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": "Registration not found"})


async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Database error occurred"})


async def shutting_down_error_handler(request: Request, exc: ShuttingDownError):
    return JSONResponse(
        status_code=503,
        content={"error": "Server is shutting down"},
        headers={"Retry-After": "30"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Dict details are already shaped as a response body
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    development = request.app.state.config.get("environment") == "development"
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if development else "Something went wrong",
        },
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(ShuttingDownError, shutting_down_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
