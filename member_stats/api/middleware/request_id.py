"""
Request ID Middleware.

Generates or extracts a unique identifier per request for log tracing.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from uuid import uuid4


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to generate/extract request IDs.

    Headers:
    - X-Request-ID: Client can provide, or we generate

    Stored in request.state.request_id for downstream use and echoed back
    on the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response
