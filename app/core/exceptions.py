"""Custom exceptions and FastAPI exception handlers.

Errors are rendered as RFC 7807 Problem Details.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app.core.logging import get_logger
from app.core.problem_details import (
    ERROR_TYPES,
    ProblemDetailResponse,
    problem_response,
)

logger = get_logger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================


class CommunityTripError(Exception):
    """Base exception for CommunityTrip application errors.

    Each subclass maps to an RFC 7807 problem type URI and HTTP status.
    """

    error_type_uri: str = ERROR_TYPES["INTERNAL_ERROR"]

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    @property
    def title(self) -> str:
        """RFC 7807 title - short summary of problem type."""
        return self.code.replace("_", " ").title()


class BadRequestError(CommunityTripError):
    """Bad request error.

    Use when the request is well-formed HTTP but its values cannot be served.
    """

    error_type_uri: str = ERROR_TYPES["BAD_REQUEST"]

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
        code: str = "BAD_REQUEST",
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            details=details,
        )


class InvalidDateFormatError(BadRequestError):
    """A date string is not a valid ``YYYY-MM-DD`` calendar date."""

    error_type_uri: str = ERROR_TYPES["INVALID_DATE_FORMAT"]

    def __init__(
        self,
        value: object,
        field: str | None = None,
    ) -> None:
        self.value = value
        self.field = field
        target = f"{field} " if field else ""
        super().__init__(
            message=f"{target}must be a date in format YYYY-MM-DD, got {value!r}",
            details={"value": str(value), "field": field},
            code="INVALID_DATE_FORMAT",
        )


class DateRangeTooLargeError(BadRequestError):
    """Bucket enumeration for a date window would exceed the safety cap."""

    error_type_uri: str = ERROR_TYPES["DATE_RANGE_TOO_LARGE"]

    def __init__(
        self,
        max_buckets: int,
        granularity: str | None = None,
    ) -> None:
        self.max_buckets = max_buckets
        self.granularity = granularity
        super().__init__(
            message=f"Date range too large: more than {max_buckets} "
            f"{granularity or 'time'} buckets. Narrow the range or use a coarser group_by.",
            details={"max_buckets": max_buckets, "granularity": granularity},
            code="DATE_RANGE_TOO_LARGE",
        )


class UnauthorizedError(CommunityTripError):
    """Caller identity is missing or unreadable."""

    error_type_uri: str = ERROR_TYPES["UNAUTHORIZED"]

    def __init__(
        self,
        message: str = "User not authenticated",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            details=details,
        )


class ForbiddenError(CommunityTripError):
    """Caller is authenticated but its role may not use this endpoint."""

    error_type_uri: str = ERROR_TYPES["FORBIDDEN"]

    def __init__(
        self,
        message: str = "Forbidden",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
            details=details,
        )


# =============================================================================
# Exception Handlers (RFC 7807)
# =============================================================================


async def communitytrip_exception_handler(
    _request: Request,
    exc: CommunityTripError,
) -> ProblemDetailResponse:
    """Handle CommunityTripError exceptions with RFC 7807 Problem Details.

    Args:
        _request: FastAPI request object.
        exc: The raised exception.

    Returns:
        RFC 7807 Problem Detail response.
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )

    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        error_code=exc.code,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Handle request validation errors with RFC 7807 Problem Details.

    Args:
        request: FastAPI request object.
        exc: Pydantic validation error.

    Returns:
        RFC 7807 Problem Detail response with field-level errors.
    """
    field_errors: list[dict[str, str]] = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = ".".join(str(part) for part in loc if part != "body")
        field_errors.append(
            {
                "field": field_path,
                "message": str(error.get("msg", "Validation failed")),
                "type": str(error.get("type", "unknown")),
            }
        )

    logger.warning(
        "app.validation_error",
        error_count=len(field_errors),
        path=str(request.url.path),
        fields=[e["field"] for e in field_errors],
    )

    return problem_response(
        status=422,
        title="Validation Error",
        detail=f"Request validation failed with {len(field_errors)} error(s). "
        "Check the 'errors' field for details.",
        error_code="VALIDATION_ERROR",
        errors=field_errors,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> ProblemDetailResponse:
    """Handle unexpected exceptions with RFC 7807 Problem Details.

    Args:
        request: FastAPI request object.
        exc: The raised exception.

    Returns:
        RFC 7807 Problem Detail response.
    """
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=str(request.url.path),
        exc_info=True,
    )

    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred. Please try again later or "
        "contact support with the request_id.",
        error_code="INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(CommunityTripError, communitytrip_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
