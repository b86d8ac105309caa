"""HTTP middleware."""
from member_stats.api.middleware.body_size import BodySizeMiddleware
from member_stats.api.middleware.logging import LoggingMiddleware
from member_stats.api.middleware.request_id import RequestIDMiddleware

__all__ = ["BodySizeMiddleware", "LoggingMiddleware", "RequestIDMiddleware"]
