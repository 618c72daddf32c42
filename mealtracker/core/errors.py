"""
Error taxonomy and the FastAPI handlers that turn it into JSON responses.

Every error body has the shape {"error": "<message>"}. Messages are meant for
end users; storage and upstream details stay in the server log.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class MealTrackerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(MealTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(MealTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotFoundError(MealTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(MealTrackerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateEmailError(ConflictError):
    default_message = "User with this email already exists"


class StorageError(MealTrackerError):
    default_message = "Operation failed"


class UpstreamError(MealTrackerError):
    """Failure of a third-party API; carries the upstream status when there is one."""

    default_message = "Upstream service error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _describe_validation_error(exc: RequestValidationError) -> str:
    missing = []
    invalid = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        if err.get("type") == "missing":
            missing.append(field)
        else:
            invalid.append(field)

    if missing:
        return "Missing required fields: " + ", ".join(missing)
    return "Invalid value for: " + ", ".join(invalid)


async def _handle_domain_error(request: Request, exc: MealTrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def _handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse({"error": message}, status_code=exc.status_code, headers=exc.headers)


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MealTrackerError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(HTTPException, _handle_http_exception)
    app.add_exception_handler(Exception, _handle_unexpected)
