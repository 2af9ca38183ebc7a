"""
Session error handling utilities.

Provides a decorator that maps scheduling exceptions to HTTP responses
consistently across the session endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from training_backend.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    SchedulingException,
    ValidationError,
)
from training_backend.models.common import ErrorResponse

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_STATUS_BY_ERROR: tuple[tuple[type[SchedulingException], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(error: SchedulingException) -> int:
    """HTTP status code for a scheduling exception."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_session_errors(func: F) -> F:
    """
    Decorator to handle scheduling errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with their context
    - Mapping exception families to HTTP status codes
    - Ensuring uniform error response bodies
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except SchedulingException as e:
            status_code = status_for(e)
            logger.warning(
                f"Request rejected: {type(e).__name__}",
                extra={"error": e.message, "status_code": status_code, **_safe_details(e)},
            )
            raise HTTPException(
                status_code=status_code,
                detail=ErrorResponse(error=e.message, details=e.details or None).model_dump(),
            )

        except PydanticValidationError as e:
            logger.warning("Pydantic validation error", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=e.errors(include_url=False, include_context=False),
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in session operation",
                extra={"error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during session operation",
            )

    return wrapper  # type: ignore


def _safe_details(error: SchedulingException) -> dict[str, str]:
    # LogRecord attributes must not be shadowed
    return {f"detail_{key}": str(value) for key, value in error.details.items()}
