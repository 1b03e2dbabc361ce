"""Application exceptions rendered directly by FastAPI.

``retryable`` tells callers whether repeating the same request (after a
re-read, with backoff) can succeed.
"""

from fastapi import HTTPException, status

UNAUTHORIZED_DETAIL = "Authorization failed."


class AppException(HTTPException):
    """Base application exception."""

    retryable: bool = False

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(AppException):
    """No record exists for the given booking reference."""

    def __init__(self, resource: str = "Booking", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} '{identifier}' not found"
        self.identifier = identifier
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransitionError(AppException):
    """Requested status is not reachable from the current one."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid booking transition: {current} -> {requested}",
        )


class UnauthorizedError(AppException):
    """A check-in token failed verification.

    The detail is identical for every failure reason.
    """

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL)


class ConflictError(AppException):
    """A write raced with another one and lost."""

    retryable = True

    def __init__(self, detail: str = "Booking was modified concurrently, reload and retry") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnavailableError(AppException):
    """The booking store could not be reached."""

    retryable = True

    def __init__(self, detail: str = "Booking store is unavailable, retry shortly") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": "5"},
        )
