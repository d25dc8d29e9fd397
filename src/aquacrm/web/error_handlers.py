import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from aquacrm.errors import NotFoundError, UserError, ValidationError

logger = structlog.get_logger(__name__)

# Most specific first; anything else raised as a UserError is a plain bad request
USER_ERROR_STATUS: tuple[tuple[type[UserError], int, str], ...] = (
    (NotFoundError, 404, "not_found"),
    (ValidationError, 400, "validation_error"),
)


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "type": error_type})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Errors whose message is safe to show: 404 for missing records, 400 otherwise."""
    for error_class, status_code, error_type in USER_ERROR_STATUS:
        if isinstance(exc, error_class):
            return error_response(status_code, str(exc), error_type)
    return error_response(400, str(exc), "bad_request")


async def store_unavailable_handler(request: Request, exc: Exception) -> Response:
    """Backing store failures (503). Nothing was written, so the request may be retried."""
    logger.error("store_unavailable", path=request.url.path, error=str(exc))
    return error_response(503, "The service is temporarily unavailable, please retry.", "store_unavailable")


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("unexpected_error", path=request.url.path, exc_info=exc)
    return error_response(500, "An unexpected error occurred.", "internal_server_error")
