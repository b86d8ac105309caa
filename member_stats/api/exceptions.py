"""Custom exceptions for API layer."""

from typing import Any, Dict, List, Optional


class APIError(Exception):
    """Base class for API errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(APIError):
    """Resource not found."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            error_code="NOT_FOUND",
            message=message,
            status_code=404,
            details=details,
        )


class BadRequestError(APIError):
    """Request payload or query parameters are invalid."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            error_code="BAD_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )

    @classmethod
    def from_errors(cls, errors: List[Dict[str, Any]]) -> "BadRequestError":
        """Build from a list of {field, message, type} entries."""
        message = ", ".join(e["message"] for e in errors) or "Invalid request"
        return cls(message, details={"errors": errors})


class UnauthorizedError(APIError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            error_code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class ForbiddenError(APIError):
    """Authenticated caller may not perform the operation."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            error_code="FORBIDDEN",
            message=message,
            status_code=403,
            details=details,
        )
