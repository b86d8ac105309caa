"""
Request body size limiting middleware.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from member_stats.core.config import settings

logger = logging.getLogger(__name__)


class BodySizeMiddleware(BaseHTTPMiddleware):
    """
    Rejects write requests whose body exceeds MAX_REQUEST_BODY_SIZE with 413.
    """

    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            max_size = settings.MAX_REQUEST_BODY_SIZE

            if len(body) > max_size:
                request_id = getattr(request.state, "request_id", "unknown")
                logger.warning(
                    f"[{request_id}] Request body too large: {len(body)} bytes "
                    f"(max: {max_size})"
                )
                return JSONResponse(
                    status_code=413,
                    content={
                        "detail": {
                            "error_code": "PAYLOAD_TOO_LARGE",
                            "message": f"Request body exceeds maximum size of {max_size} bytes",
                        }
                    },
                )

        return await call_next(request)
