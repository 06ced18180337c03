"""
Request middleware: correlation ids, timing, access logging and request metrics.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

from event_booking.core.logging import get_logger
from event_booking.core.metrics import record_request

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Polled by load balancers and scrapers; logged at debug only
QUIET_PATHS = {"/health", "/health/ready", "/metrics"}


def _route_name(request: Request, base_root_path: str) -> str:
    """
    Full route template of the matched endpoint, e.g. `/api/v1/events/{event_id}`.

    Templates keep metric label cardinality bounded. Depending on the
    FastAPI release, a route under a prefixed router reports its path
    relative to that prefix (the prefix moving into `root_path`, or
    dropped entirely), so the missing head is restored from the request.
    """
    template = getattr(request.scope.get("route"), "path", None)
    if not template:
        return "unmatched"

    template = request.scope.get("root_path", "")[len(base_root_path):] + template
    path = request.url.path
    static_head = template.split("{", 1)[0]
    if not path.startswith(static_head):
        offset = path.find(static_head)
        if offset > 0:
            template = path[:offset] + template
    return template


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds request_id, method, path and client to structlog contextvars,
    logs one line per request and sets X-Request-ID / X-Response-Time.
    An incoming X-Request-ID from a proxy is reused.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        base_root_path = request.scope.get("root_path", "")
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error("request_failed", error=str(e), duration_ms=duration_ms)
            record_request(request.method, _route_name(request, base_root_path), 500)
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        record_request(request.method, _route_name(request, base_root_path), response.status_code)

        if request.url.path in QUIET_PATHS:
            log = logger.debug
        elif response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
