import logging
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from mflix.errors import MethodNotAllowedError, UserError
from mflix.web.responses import create_envelope_response

logger = logging.getLogger(__name__)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses using the status each one declares."""
    error = cast(UserError, exc)
    return create_envelope_response(status_code=error.status_code, message=error.message, error=error.error)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Malformed or mistyped request bodies and parameters are invalid input (400)."""
    detail = None
    if isinstance(exc, RequestValidationError) and exc.errors():
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        detail = f"{location}: {first.get('msg', 'invalid value')}"
    return create_envelope_response(status_code=400, message="Invalid request", error=detail)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Wrap routing errors (unknown path, unsupported verb) in the envelope."""
    status_code = exc.status_code if isinstance(exc, StarletteHTTPException) else 500
    if status_code == 405:
        error = MethodNotAllowedError(request.method)
        return create_envelope_response(status_code=405, message=error.message, error=error.error)
    message = exc.detail if isinstance(exc, StarletteHTTPException) else "Internal Server Error"
    return create_envelope_response(status_code=status_code, message=str(message))


async def store_error_handler(_: Request, exc: Exception) -> Response:
    """Database failures (500). The driver message is passed through unchanged."""
    logger.error("Database error: %s", exc)
    return create_envelope_response(status_code=500, message="Internal Server Error", error=str(exc))


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_envelope_response(status_code=500, message="Internal Server Error", error=str(exc))
