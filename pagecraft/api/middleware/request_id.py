"""
Request ID middleware for pagecraft.

Accepts a client-supplied X-Request-ID when it looks sane, otherwise
generates a UUID4. The ID is stored on request.state, bound into the
structlog context for every log line of the request, and echoed back in
the response headers.
"""
import re
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pagecraft.core.logging import clear_log_context, get_logger, set_log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Printable token, bounded length
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{8,128}$")


def generate_request_id() -> str:
    return str(uuid.uuid4())


def is_valid_request_id(request_id: str) -> bool:
    return bool(_VALID_REQUEST_ID.match(request_id))


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Request ID propagation and log correlation."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        client_request_id = request.headers.get(REQUEST_ID_HEADER.lower())

        if client_request_id and is_valid_request_id(client_request_id):
            request_id = client_request_id
        else:
            request_id = generate_request_id()
            if client_request_id:
                logger.warning(
                    "Invalid client request ID replaced",
                    client_request_id=client_request_id[:128],
                    request_id=request_id,
                )

        request.state.request_id = request_id

        clear_log_context()
        set_log_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
    "generate_request_id",
    "is_valid_request_id",
]
