"""
Error types and the application-level exception handlers.

Every error leaves the API as JSON shaped ``{message, error?, stack?}``;
``stack`` is only included while running in development.
"""
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from eventdekho.core.config import settings
from eventdekho.core.logging import logger


class IntegrationError(Exception):
    """A downstream integration (mail server, object storage) failed."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class MailerNotConfigured(IntegrationError):
    def __init__(self):
        super().__init__("Mailer not configured (SMTP env vars missing)")


def error_body(message: str, exc: Optional[BaseException] = None, error: Optional[str] = None) -> dict:
    body: Dict[str, Any] = {"message": message}
    if error is not None:
        body["error"] = error
    elif exc is not None:
        body["error"] = str(exc)
    if exc is not None and settings.is_development:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # A dict detail is already a full error body, e.g. {message, error}
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.debug(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Missing required fields", "error": errors},
    )


async def integration_error_handler(request: Request, exc: IntegrationError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} integration failure: {exc.message} ({exc.error})")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(exc.message, error=exc.error),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit hit on {request.method} {request.url.path}: {exc.detail}")
    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": "Too many requests", "error": f"Rate limit exceeded: {exc.detail}"},
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled server error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal Server Error", exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrationError, integration_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
