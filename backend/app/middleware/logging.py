"""
MessageWall Backend - Access Log Middleware
=============================================

What:  One access log line per request, tagged with the wall operation it hit.
How:   Times call_next, classifies the path (list / create / like), and picks
       the log level from the status class: 5xx → ERROR, 4xx → WARNING.
When:  Runs inside RequestIDMiddleware so the request ID is already set.

What we log vs what we DON'T log:
    ✅ Log: operation, message id (likes), status, duration, client IP, request ID
    ❌ Don't log: request bodies (message text is user content)
"""

import logging
import re
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("messagewall.access")

_LIKE_PATH = re.compile(r"^/api/messages/(?P<message_id>[^/]+)/like/?$")
_MESSAGES_PATH = re.compile(r"^/api/messages/?$")


def classify_request(method: str, path: str) -> Tuple[str, Optional[str]]:
    """
    Maps a request onto a wall operation.

    Returns (operation, message_id); message_id is the raw path segment of a
    like request and None otherwise.
    """
    like = _LIKE_PATH.match(path)
    if like and method == "POST":
        return "like", like.group("message_id")
    if _MESSAGES_PATH.match(path):
        if method == "GET":
            return "list", None
        if method == "POST":
            return "create", None
    return "other", None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """GET /health is not logged."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/health":
            return await call_next(request)

        operation, message_id = classify_request(request.method, request.url.path)
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        target = f" message={message_id}" if message_id else ""
        logger.log(
            log_level,
            "[%s] %s%s -> %d in %.1fms",
            rid,
            operation,
            target,
            status,
            duration_ms,
            extra={
                "request_id": rid,
                "operation": operation,
                "message_id": message_id,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
