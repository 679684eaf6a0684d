"""
Global error handling middleware.
"""
import logging
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from forest_console.infrastructure.api_client import GatewayError, NotFoundError


logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Last line of error handling for console requests.

    Entity screens and the auth service report backend failures on the page
    themselves. Whatever still escapes a route is logged here and answered
    with a small JSON error body:

    - ``GatewayError``: 502, or 404 for ``NotFoundError``
    - ``ValueError``: 400
    - anything else: 500
    """

    async def dispatch(self, request: Request, call_next: Callable):
        where = f"{request.method} {request.url.path}"
        try:
            return await call_next(request)

        except GatewayError as e:
            logger.error("Backend error escaped %s: %s", where, e)
            if isinstance(e, NotFoundError):
                return _error_response(status.HTTP_404_NOT_FOUND, "Record not found", e.message)
            return _error_response(status.HTTP_502_BAD_GATEWAY, "Backend API error", e.message)

        except ValueError as e:
            logger.warning("Rejected %s: %s", where, e)
            return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", str(e))

        except Exception:
            logger.exception("Unhandled exception in %s", where)
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                "An unexpected error occurred",
            )
