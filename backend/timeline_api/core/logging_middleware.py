"""Request logging middleware."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from timeline_api.config import settings

logger = logging.getLogger("timeline.requests")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_LOGGED_DETAIL = 500

# Polled by load balancers; logged at DEBUG only.
QUIET_PATHS = frozenset({"/health"})


async def _read_body(response: Response) -> bytes:
    body = b""
    async for chunk in response.body_iterator:  # type: ignore[attr-defined]
        body += chunk.encode("utf-8") if isinstance(chunk, str) else chunk
    return body


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with user, method, path, status and duration.

    Each request gets an id (taken from the incoming X-Request-ID header or
    generated) which is echoed back on the response. For 4xx/5xx responses
    the error body is logged too, so FastAPI's "detail" shows up next to
    the request line.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        user = request.headers.get(settings.user_header) or "-"

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        prefix = f"[{request_id}] {user} {request.method} {path}"

        if response.status_code >= 400 and hasattr(response, "body_iterator"):
            body = await _read_body(response)
            detail = body.decode("utf-8", errors="replace")
            if len(detail) > MAX_LOGGED_DETAIL:
                detail = detail[:MAX_LOGGED_DETAIL] + "..."

            log = logger.warning if response.status_code < 500 else logger.error
            log(
                "%s → %d (%.0fms): %s",
                prefix,
                response.status_code,
                duration_ms,
                detail,
            )
            # The body iterator is consumed; hand the client a fresh response.
            response = Response(
                content=body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type,
            )
        else:
            log = logger.debug if request.url.path in QUIET_PATHS else logger.info
            log("%s → %d (%.0fms)", prefix, response.status_code, duration_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
