"""
Request ID middleware.

Every request gets an ID that shows up in the X-Request-ID response header,
in every log line and in the audit fields of sign-in outcomes. A client
may supply its own ID; anything that is not a short token is replaced.
"""

import re
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sceau.infrastructure.monitoring.logger import set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def accept_request_id(candidate: str) -> bool:
    """Check if a client-supplied request ID is safe to log and echo."""
    return bool(candidate) and _VALID_REQUEST_ID.match(candidate) is not None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the request context and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = set_request_id(
            supplied if accept_request_id(supplied) else None
        )
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
