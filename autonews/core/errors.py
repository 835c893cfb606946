"""Error taxonomy shared by the API, the services and the async client.

Validation and transition errors go back to the immediate caller. Store errors
mean the backend was unreachable or rejected the write; callers roll back any
optimistic state and report a generic failure without retrying.
"""
from typing import Optional

from fastapi import status


class AutoNewsError(Exception):
    """Base error"""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail or self.__class__.__doc__ or self.__class__.__name__


class ValidationError(AutoNewsError):
    """Required field missing"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation"


class InvalidTransitionError(AutoNewsError):
    """Illegal status change"""
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"


class AuthRequiredError(AutoNewsError):
    """Not authenticated"""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "auth_required"


class PermissionDeniedError(AutoNewsError):
    """Not enough permissions"""
    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"


class NotFoundError(AutoNewsError):
    """Post not found"""
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StoreError(AutoNewsError):
    """Backing store failure"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store"


class DuplicateError(StoreError):
    """Row already exists"""
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate"


ERRORS_BY_STATUS = {
    status.HTTP_401_UNAUTHORIZED: AuthRequiredError,
    status.HTTP_403_FORBIDDEN: PermissionDeniedError,
    status.HTTP_404_NOT_FOUND: NotFoundError,
    status.HTTP_409_CONFLICT: DuplicateError,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ValidationError,
}

ERRORS_BY_CODE = {
    error_class.code: error_class
    for error_class in (
        ValidationError,
        InvalidTransitionError,
        AuthRequiredError,
        PermissionDeniedError,
        NotFoundError,
        StoreError,
        DuplicateError,
    )
}


def error_for_status(status_code: int, detail: str = "", code: Optional[str] = None) -> AutoNewsError:
    """Map an HTTP error response back to the error it was raised from.

    ``code`` is the ``error`` field of the response body; statuses shared by
    several errors (409) are told apart by it.
    """
    error_class = ERRORS_BY_CODE.get(code) or ERRORS_BY_STATUS.get(status_code, StoreError)
    return error_class(detail)
