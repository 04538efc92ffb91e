"""
Notes API: Request Logging Middleware
=====================================

What:  One access log line for every HTTP request, including failed ones.
How:   Times the downstream call and logs method, path, status and duration
       together with the request id. An exception that escaped every
       exception handler is logged with its traceback and answered with
       500 {"message": "internal error"}, so it still gets an access line.
When:  Inside RequestIDMiddleware, so the request id is already set and the
       X-Request-ID header is added to the 500 as well.

Log levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO.
    Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from notes_api.exceptions import INTERNAL_ERROR
from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                e,
                exc_info=e,
            )
            response = JSONResponse(status_code=500, content={"message": INTERNAL_ERROR})

        self._log_access(request, response.status_code, started, rid)
        return response

    @staticmethod
    def _log_access(request: Request, status: int, started: float, rid: str) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s]",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
