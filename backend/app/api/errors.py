"""
Translate planner errors into HTTP responses.
"""

from fastapi import HTTPException, status

from app.core.exceptions import (
    BusinessLogicError,
    ConflictError,
    DayGateError,
    DeepCalendarError,
    DuplicateError,
    FullyCoveredError,
    NotFoundError,
    OutsideWindowError,
    ValidationError,
    WeekdayLockedError,
)

_STATUS_BY_ERROR: list[tuple[type[DeepCalendarError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (DayGateError, status.HTTP_409_CONFLICT),
    (WeekdayLockedError, status.HTTP_423_LOCKED),
    (FullyCoveredError, status.HTTP_400_BAD_REQUEST),
    (OutsideWindowError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (BusinessLogicError, status.HTTP_400_BAD_REQUEST),
]


def to_http_exception(exc: DeepCalendarError) -> HTTPException:
    """
    Build the HTTPException for a planner error.

    The body carries the error type, message and structured details so a
    client can show the conflicting ranges or retry with a strategy.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )
