"""
Middleware package for pagecraft.

Exports middleware classes and exception handler registration.
"""

from pagecraft.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from pagecraft.api.middleware.request_id import RequestIDMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestIDMiddleware",
    "register_exception_handlers",
]
