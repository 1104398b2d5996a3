from typing import Optional

from core.errors import AuthorizationDenied, IdentityRequired
from schemas.identity import Identity
from schemas.poems import Poem


class AuthService:
    """Правило владения. Одна и та же функция решает и для интерфейса, и для сервера."""

    @staticmethod
    def can_mutate(poem: Poem, identity: Optional[Identity]) -> bool:
        return identity is not None and poem.owner_id is not None and identity.handle == poem.owner_id

    @staticmethod
    def require_identity(identity: Optional[Identity]) -> Identity:
        if identity is None:
            raise IdentityRequired()
        return identity

    @staticmethod
    def ensure_can_mutate(poem: Poem, identity: Optional[Identity]) -> Identity:
        identity = AuthService.require_identity(identity)
        if not AuthService.can_mutate(poem, identity):
            raise AuthorizationDenied()
        return identity
