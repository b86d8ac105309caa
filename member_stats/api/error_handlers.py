"""Error handlers for consistent API error responses."""

import logging
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import NoResultFound

from member_stats.api.exceptions import APIError, BadRequestError


logger = logging.getLogger(__name__)


def format_validation_errors(raw_errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic error entries into {field, message, type} dicts."""
    errors = []
    for error in raw_errors:
        # "body" / "query" prefixes are transport detail, not field names
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        field = ".".join(loc)
        errors.append({
            "field": field,
            "message": f"{field}: {error['msg']}" if field else error["msg"],
            "type": error["type"],
        })
    return errors


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.to_dict(),
        },
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle FastAPI request validation errors as 400s."""
    error = BadRequestError.from_errors(format_validation_errors(exc.errors()))
    return await api_error_handler(request, error)


async def pydantic_error_handler(
    request: Request,
    exc: PydanticValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors raised outside request parsing."""
    error = BadRequestError.from_errors(format_validation_errors(exc.errors()))
    return await api_error_handler(request, error)


async def no_result_error_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    """A reconciled item id that does not exist under its parent."""
    logger.warning(f"Missing row during {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "detail": {
                "error_code": "NOT_FOUND",
                "message": str(exc) or "Statistics item not found",
            },
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(f"Unhandled error: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "error_code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the app."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PydanticValidationError, pydantic_error_handler)
    app.add_exception_handler(NoResultFound, no_result_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
