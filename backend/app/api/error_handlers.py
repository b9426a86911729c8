"""Error Handlers — map exceptions to the sleep tracker's JSON error envelope.

Invariants:
    - SleepTrackerError renders its own to_response() at its own http_status
    - A query days/limit/offset that is not an integer renders as the field's
      InvalidParameterError (same code and allowed range as an out-of-range value)
    - Any other request validation failure is 400 VALIDATION_ERROR with per-field details
    - Unhandled exceptions are 500 INTERNAL_ERROR and never echo exception text

Design Decisions:
    - 4xx domain errors logged at WARNING, 5xx at ERROR: client mistakes are not incidents
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import (
    SleepTrackerError, InvalidParameterError, ErrorCategory, ErrorSeverity,
)
from app.core.feed_params import integer_parameter_error

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(SleepTrackerError, handle_sleep_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _render(request: Request, exc: SleepTrackerError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_sleep_tracker_error(request: Request, exc: SleepTrackerError):
    return _render(request, exc)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    parameter_error = _integer_parameter_error(errors)
    if parameter_error is not None:
        return _render(request, parameter_error)

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in errors
                ],
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _integer_parameter_error(errors) -> InvalidParameterError | None:
    """First query-string days/limit/offset error, in feed validation order."""
    failed = {
        e["loc"][-1] for e in errors
        if len(e["loc"]) == 2 and e["loc"][0] == "query"
    }
    for field in ("days", "limit", "offset"):
        if field in failed:
            return integer_parameter_error(field)
    return None
