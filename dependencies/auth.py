import logging
from typing import Optional

import jwt
from fastapi import Depends, Request
from supabase import Client

from core.config import settings
from core.database import get_db
from core.errors import IdentityRequired, StoreUnavailable
from dependencies.errors import http_error
from schemas.identity import Identity
from services.identity_service import identity_from_claims
from services.poem_service import PoemService

logger = logging.getLogger(__name__)


def _read_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    token = header or request.cookies.get("access_token")
    if not token:
        return None
    if token.startswith("Bearer "):
        token = token.split(" ", 1)[1]
    return token or None


def decode_identity(token: str) -> Optional[Identity]:
    """Проверяет JWT, выданный Supabase Auth. Невалидный токен - это «не вошёл»."""
    if not settings.SUPABASE_JWT_SECRET:
        logger.warning("SUPABASE_JWT_SECRET is not set; every request is anonymous")
        return None
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.PyJWTError as e:
        logger.warning("JWT Error: %s", e)
        return None
    return identity_from_claims(payload)


def get_current_identity_optional(request: Request) -> Optional[Identity]:
    token = _read_token(request)
    if token is None:
        return None
    return decode_identity(token)


def get_current_identity(identity: Optional[Identity] = Depends(get_current_identity_optional)) -> Identity:
    if identity is None:
        raise http_error(IdentityRequired())
    return identity


def get_client() -> Client:
    try:
        return get_db()
    except StoreUnavailable as e:
        raise http_error(e) from None


def get_poem_service(db: Client = Depends(get_client)) -> PoemService:
    return PoemService(db)
