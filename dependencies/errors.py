from fastapi import HTTPException, status

from core.errors import (
    AuthorizationDenied, IdentityRequired, PoemError, PoemNotFound, QueryFailed,
    StoreUnavailable, ValidationFailed, WriteRejected,
)

# Порядок важен: PoemNotFound - подкласс QueryFailed
ERROR_STATUS = [
    (ValidationFailed, status.HTTP_400_BAD_REQUEST),
    (IdentityRequired, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationDenied, status.HTTP_403_FORBIDDEN),
    (PoemNotFound, status.HTTP_404_NOT_FOUND),
    (WriteRejected, status.HTTP_409_CONFLICT),
    (QueryFailed, status.HTTP_502_BAD_GATEWAY),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: PoemError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(error: PoemError) -> HTTPException:
    """Переводит ошибку стихов в HTTPException с уведомлением в detail."""
    return HTTPException(status_code=status_for(error), detail=error.message)
