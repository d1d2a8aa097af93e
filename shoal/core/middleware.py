"""Middleware: request ID injection and a per-request access line.

The access line names the fish scope a request ran against. Session tokens
are the only credential a Shoal client holds, so they are logged as a short
digest, never verbatim.
"""

import hashlib
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("shoal.access")

TEMPLATE_SCOPE = "template"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, echoed back in X-Request-ID and in error bodies."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One line per request: id, fish scope, endpoint, status, latency.

    `scope` is `session:<digest>` once the session header has resolved, and
    `template` for requests that ran without a session.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - start) * 1000, 1)

        request_id = getattr(request.state, "request_id", "-")
        session_id = getattr(request.state, "session_id", None)
        scope = f"session:{session_digest(session_id)}" if session_id else TEMPLATE_SCOPE
        client_ip = request.client.host if request.client else "-"

        logger.info(
            "request_id=%s scope=%s ip=%s %s %s -> %d (%.1f ms)",
            request_id,
            scope,
            client_ip,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def session_digest(session_id: str) -> str:
    """First 12 hex chars of the token's SHA-256."""
    return hashlib.sha256(session_id.encode()).hexdigest()[:12]
