import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from supabase import Client

from schemas.identity import Identity

logger = logging.getLogger(__name__)

IdentityCallback = Callable[[Optional[Identity]], None]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    def get_current_identity(self) -> Optional[Identity]: ...

    def on_change(self, callback: IdentityCallback) -> Unsubscribe: ...


def identity_from_user(user: Any) -> Optional[Identity]:
    """Преобразует пользователя Supabase Auth в Identity."""
    if user is None or not getattr(user, "id", None):
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(handle=str(user.id), display_name=metadata.get("name"), email=getattr(user, "email", None))


def identity_from_claims(payload: Dict[str, Any]) -> Optional[Identity]:
    """Преобразует payload JWT Supabase в Identity."""
    handle = payload.get("sub")
    if not handle:
        return None
    metadata = payload.get("user_metadata") or {}
    return Identity(handle=str(handle), display_name=metadata.get("name"), email=payload.get("email"))


class SupabaseIdentityProvider:
    def __init__(self, db: Client):
        self.db = db

    def get_current_identity(self) -> Optional[Identity]:
        response = self.db.auth.get_user()
        return identity_from_user(response.user if response else None)

    def on_change(self, callback: IdentityCallback) -> Unsubscribe:
        def handler(_event, session):
            callback(identity_from_user(session.user if session else None))

        subscription = self.db.auth.on_auth_state_change(handler)
        return subscription.unsubscribe


class IdentityResolver:
    """Текущая личность пользователя. Ошибки провайдера означают «не вошёл»."""

    def __init__(self, provider: IdentityProvider):
        self.provider = provider
        self._identity: Optional[Identity] = None
        self._resolved = False
        self._callbacks: List[IdentityCallback] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    def refresh(self) -> Optional[Identity]:
        try:
            self._identity = self.provider.get_current_identity()
        except Exception as e:
            logger.warning("Identity resolution failed, treating as signed out: %s", e)
            self._identity = None
        self._resolved = True
        return self._identity

    def current_identity(self) -> Optional[Identity]:
        if not self._resolved:
            return self.refresh()
        return self._identity

    def subscribe(self, callback: IdentityCallback) -> Unsubscribe:
        """Подписывает callback на смены личности; первое определение тоже считается сменой."""
        self._callbacks.append(callback)
        if self._unsubscribe is None:
            try:
                self._unsubscribe = self.provider.on_change(self._handle_change)
            except Exception as e:
                logger.warning("Identity change subscription failed: %s", e)
        callback(self.refresh())

        def unsubscribe():
            if callback in self._callbacks:
                self._callbacks.remove(callback)
            if not self._callbacks and self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None

        return unsubscribe

    def _handle_change(self, identity: Optional[Identity]) -> None:
        self._identity = identity
        self._resolved = True
        for callback in list(self._callbacks):
            callback(identity)

    @staticmethod
    def default_signature(identity: Optional[Identity]) -> str:
        if identity is None:
            return ""
        return identity.display_name or identity.email or ""
