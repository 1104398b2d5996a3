from .auth_service import AuthService
from .appreciation_service import AppreciationService
from .composer import Composer
from .identity_service import IdentityResolver, SupabaseIdentityProvider
from .signature_service import SignatureService, InMemoryKeyValueStore, JsonFileKeyValueStore
from .poem_service import PoemService
from .reconciler import PoemListReconciler
from .board_service import PoemBoard

__all__ = [
    "AuthService", "AppreciationService", "Composer",
    "IdentityResolver", "SupabaseIdentityProvider",
    "SignatureService", "InMemoryKeyValueStore", "JsonFileKeyValueStore",
    "PoemService", "PoemListReconciler", "PoemBoard",
]
