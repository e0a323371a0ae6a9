"""
MessageWall Backend - Request ID Middleware
=============================================

What:  Tags each request with a short correlation ID, echoed in the
       X-Request-ID response header and in every error body.
How:   A client-supplied X-Request-ID is kept when it is a plain token
       (letters, digits, '.', '_', '-', at most 64 chars); anything else is
       replaced by a fresh 8-char ID so it cannot forge access-log lines.
       The ID lives in a ContextVar for loggers and exception handlers.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Returns the client's ID when it is a safe token, else a new one."""
    if supplied and _CLIENT_ID_PATTERN.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
