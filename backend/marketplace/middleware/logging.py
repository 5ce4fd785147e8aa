"""
Marketplace Backend — Request Logging Middleware
=================================================

What:  One access log line per HTTP request.
How:   Measures the time from middleware entry to response and logs method,
       path, status, duration, request id and client address on the
       `marketplace.access` logger.

Every GraphQL operation is a POST to the same path, so operation-level
logging lives in the services.

What we DON'T log: request bodies (GraphQL variables may contain personal
data) and the caller header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from marketplace.middleware.request_id import request_id_var

logger = logging.getLogger("marketplace.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Log level follows the status code: 5xx → ERROR, 4xx → WARNING,
    everything else → INFO. /health is not logged.
    """

    SILENT_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path

        if path in self.SILENT_PATHS:
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
