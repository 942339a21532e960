"""Request context middleware: one ID per request, carried into every log line.

Concurrent activity submissions interleave in the log.  The request ID
ties the lines of one submission together:

  INFO  [req-abc] Activity recorded user=42 unit=1337 section=overview
  INFO  [req-xyz] Duplicate activity suppressed user=7 unit=1337 ...
  ERROR [req-abc] Store operation failed: record completion

The ID lives in a ContextVar, not a thread-local: FastAPI runs many
requests on one thread and each async task gets its own context copy.

Request timing recorded here feeds the "duration_ms" field of the JSON
log output.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Attach the current request ID to every LogRecord.

    A filter rather than a formatter: formatters only read fields that
    already exist on the record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        return True


# Installed on the root logger so every module's logger inherits it.
root_logger = logging.getLogger()
if not any(isinstance(f, _RequestContextFilter) for f in root_logger.filters):
    root_logger.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request, log one summary line.

    An incoming X-Request-ID header is reused so a caller (an LMS front
    end, a batch importer) can correlate its own logs with ours.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
