# core/__init__.py
from .config import settings
from .database import get_db
from .errors import (
    PoemError, ValidationFailed, IdentityRequired, AuthorizationDenied,
    StoreUnavailable, WriteRejected, QueryFailed, PoemNotFound,
)

__all__ = [
    "settings", "get_db",
    "PoemError", "ValidationFailed", "IdentityRequired", "AuthorizationDenied",
    "StoreUnavailable", "WriteRejected", "QueryFailed", "PoemNotFound",
]
