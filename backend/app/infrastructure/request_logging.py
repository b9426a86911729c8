"""Request Logging — one structured log line per HTTP request.

Invariants:
    - Every response carries X-Request-ID (echoed from the request or generated)
    - Logged fields: request_id, method, path, status_code, duration_ms, user_id
    - user_id is the raw X-USER-ID header value; it is logged, never trusted here

Design Decisions:
    - Registered as an http middleware function, like the error handlers, from
      a single register_* entry point called in main.py
"""

import logging
import time
import uuid

from fastapi import FastAPI, Request

logger = logging.getLogger("app.requests")

REQUEST_ID_HEADER = "X-Request-ID"


def register_request_logging(app: FastAPI) -> None:
    """Attach the request logging middleware to the app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "user_id": request.headers.get("X-USER-ID"),
            },
        )
        return response
