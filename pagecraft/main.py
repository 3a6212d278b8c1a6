"""
Main entry point for pagecraft.

ASGI application export:

    >>> from pagecraft.main import app
    >>> # Used by: uvicorn pagecraft.main:app

Direct execution starts the development server:

    python -m pagecraft.main

Production (several workers share quotas through Redis):

    gunicorn pagecraft.main:app \
        -w 4 \
        -k uvicorn.workers.UvicornWorker \
        --bind 0.0.0.0:8000
"""
import uvicorn

from pagecraft.api.app import create_app
from pagecraft.core.config.settings import settings
from pagecraft.core.logging import get_logger

logger = get_logger(__name__)

# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = create_app()


def main() -> None:
    """Run the development server."""
    logger.info(
        "Starting pagecraft",
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
        host=settings.API_HOST,
        port=settings.API_PORT,
        debug=settings.DEBUG,
    )

    uvicorn.run(
        "pagecraft.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


__all__ = ["app", "main"]


if __name__ == "__main__":
    main()
