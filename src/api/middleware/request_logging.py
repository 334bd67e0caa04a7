"""Per-request access logging through the structured logger."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request.

    Query strings are left out; reset links carry tokens there.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request crashed", extra={
                "method": request.method,
                "path": request.url.path,
                "durationMs": round((time.perf_counter() - started) * 1000, 1),
            })
            raise

        status_code = response.status_code
        log = logger.warning if status_code >= 500 else logger.info
        log("Request handled", extra={
            "method": request.method,
            "path": request.url.path,
            "status": status_code,
            "durationMs": round((time.perf_counter() - started) * 1000, 1),
        })
        return response
