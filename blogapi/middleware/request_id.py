"""
Blog API — Request ID Middleware
==================================

What:  Assigns an id to each request and returns it in X-Request-ID.
How:   Uses the client-supplied X-Request-ID when present, otherwise a short
       random id; stores it in a ContextVar so exception handlers and the
       access log can include it.

Unexpected exceptions are turned into the 500 response here rather than by
a FastAPI `Exception` handler: Starlette runs that handler outside every
user middleware, so its response would miss the X-Request-ID header.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

# Coroutine-local: each in-flight request sees its own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request and response with a correlation id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as exc:
            # No stack traces in responses, full trace in the log
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            response = JSONResponse(status_code=500, content={"message": "Internal server error"})

        response.headers["X-Request-ID"] = rid
        return response
