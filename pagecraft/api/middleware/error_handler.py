"""
Error handling for pagecraft.

Provides standardized error responses:

    {"error": {"code": ..., "message": ..., "details": ..., "request_id": ...}}

- Application exceptions (BaseAppException) are rendered by an exception
  handler with their own status code and headers (Retry-After and the
  X-RateLimit-* family on rate-limit denials).
- Request validation and Starlette HTTP errors use the same envelope.
- Anything else is caught by ErrorHandlerMiddleware and becomes a 500 that
  hides internals outside DEBUG.
"""
import traceback
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from pagecraft.core.config.settings import settings
from pagecraft.core.constants import ERR_INTERNAL, ERR_VALIDATION
from pagecraft.core.exceptions import BaseAppException
from pagecraft.core.logging import get_logger

logger = get_logger(__name__)


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
        headers=headers,
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render a known application exception."""
    status_code = exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Application exception",
        exception=exc.__class__.__name__,
        code=exc.code,
        message=exc.message,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
    )

    return error_response(
        request,
        status_code=status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details or None,
        headers=exc.headers or None,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors."""
    logger.warning(
        "Validation error",
        path=request.url.path,
        errors=exc.errors(),
    )

    return error_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code=ERR_VALIDATION,
        message="Request validation failed",
        details=jsonable_errors(exc) if settings.DEBUG else None,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions from Starlette (404, 405, ...)."""
    return error_response(
        request,
        status_code=exc.status_code,
        code=f"HTTP_{exc.status_code}",
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


# =============================================================================
# MIDDLEWARE
# =============================================================================

class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Last-resort error handling middleware.

    Converts unhandled exceptions to a 500 JSON response and logs them
    with request context.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)

        except BaseAppException as e:
            return await app_exception_handler(request, e)

        except Exception as e:
            logger.error(
                "Unhandled exception",
                exception=e.__class__.__name__,
                message=str(e),
                path=request.url.path,
                method=request.method,
                traceback=traceback.format_exc() if settings.DEBUG else None,
            )

            if settings.DEBUG:
                message = f"{e.__class__.__name__}: {e}"
                details = {"traceback": traceback.format_exc()}
            else:
                message = "An unexpected error occurred. Please try again later."
                details = None

            return error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code=ERR_INTERNAL,
                message=message,
                details=details,
            )


__all__ = [
    "ErrorHandlerMiddleware",
    "register_exception_handlers",
    "app_exception_handler",
    "error_response",
]
