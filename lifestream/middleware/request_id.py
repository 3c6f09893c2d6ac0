"""
LifeStream Backend: Request ID Middleware
===========================================

What:  Tags each request with a correlation id that shows up in the access
       log, in auth-chain warnings and in every error body.
How:   A client-supplied X-Request-ID is reused only when it is a short token
       of safe characters; anything else (missing, too long, containing
       spaces or control characters) is replaced by a generated id. The id is
       kept in a ContextVar and echoed back in the response header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]+$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def accept_request_id(candidate: Optional[str]) -> str:
    """Return `candidate` if it is safe to log and echo, else a fresh id."""
    if not candidate:
        return new_request_id()
    candidate = candidate.strip()
    if len(candidate) > MAX_REQUEST_ID_LENGTH or not _SAFE_REQUEST_ID.match(candidate):
        return new_request_id()
    return candidate


def current_request_id() -> str:
    return request_id_var.get("")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
