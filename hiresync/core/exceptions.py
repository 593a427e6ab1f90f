"""Custom exceptions for the application."""

from fastapi import HTTPException, status


class ApplicationError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class RemoteRequestError(ApplicationError):
    """Raised when hh.ru answers with a non-success status code."""

    def __init__(self, status_code: int, errors: list[dict] | None = None):
        self.status_code = status_code
        self.errors = errors or []
        details = "\n".join(
            f"{error.get('type')}: {error.get('value')}" for error in self.errors
        )
        super().__init__(f"Error code: {status_code} {details}".rstrip())

    @property
    def is_token_expired(self) -> bool:
        """True for the 403 oauth/token_expired signature."""
        return self.status_code == 403 and any(
            error.get("type") == "oauth" and error.get("value") == "token_expired"
            for error in self.errors
        )


class DataIntegrityError(ApplicationError):
    """Raised when a fetched remote record lacks fields required to proceed."""


class ConcurrencyConflictError(ApplicationError):
    """Raised when an issue keeps changing underneath a versioned update."""

    def __init__(self, issue_id: int, attempts: int):
        self.issue_id = issue_id
        self.attempts = attempts
        super().__init__(
            f"Issue {issue_id} was modified concurrently; "
            f"gave up after {attempts} attempts"
        )


class TokenUnavailableError(ApplicationError):
    """Raised when no hh.ru credential is stored or configured."""

    def __init__(self, detail: str = "No hh.ru access token available"):
        self.detail = detail
        super().__init__(detail)


def bad_gateway_exception(detail: str = "hh.ru request failed") -> HTTPException:
    """Return a 502 Bad Gateway exception."""
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )


def conflict_exception(detail: str = "Resource was modified concurrently") -> HTTPException:
    """Return a 409 Conflict exception."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )
