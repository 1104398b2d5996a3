import logging
from typing import Optional

from supabase import Client

from core.config import settings
from core.errors import PoemError, PoemNotFound
from schemas.identity import Identity
from schemas.poems import ActionResult, CompositionDraft, Poem, PoemId, PoemKind
from services.appreciation_service import AppreciationService
from services.auth_service import AuthService
from services.composer import Composer
from services.identity_service import IdentityResolver, SupabaseIdentityProvider
from services.poem_service import PoemService
from services.reconciler import PoemListReconciler
from services.signature_service import JsonFileKeyValueStore, SignatureService

logger = logging.getLogger(__name__)


class PoemBoard:
    """Клиентская сторона: черновик, список стихов и действия над ними.

    Каждое действие возвращает ActionResult; ошибки базы превращаются в
    уведомление, а список в памяти при этом не меняется.
    """

    def __init__(
        self,
        service: PoemService,
        resolver: IdentityResolver,
        signatures: SignatureService,
        retain_position: Optional[bool] = None,
        anonymous_signature: Optional[str] = None,
    ):
        self.service = service
        self.resolver = resolver
        self.signatures = signatures
        self.retain_position = settings.RETAIN_POSITION_AFTER_SUBMIT if retain_position is None else retain_position
        self.anonymous_signature = settings.ANONYMOUS_SIGNATURE if anonymous_signature is None else anonymous_signature
        self.reconciler = PoemListReconciler()
        # Локальная подпись читается один раз; в черновик попадает только явная подпись
        self.signatures.load()
        self.draft = CompositionDraft()

    @classmethod
    def from_settings(cls, db: Client) -> "PoemBoard":
        """Собирает доску из настроек: Supabase для стихов и личности, JSON-файл для подписи."""
        return cls(
            PoemService(db),
            IdentityResolver(SupabaseIdentityProvider(db)),
            SignatureService(JsonFileKeyValueStore(settings.SIGNATURE_STORE_PATH), settings.SIGNATURE_NAMESPACE),
        )

    @property
    def identity(self) -> Optional[Identity]:
        return self.resolver.current_identity()

    @property
    def poems(self):
        return self.reconciler.poems

    # --- Черновик ---

    def select_position(self, lat: float, lon: float) -> None:
        Composer.set_position(self.draft, lat, lon)

    def set_kind(self, kind: PoemKind) -> None:
        Composer.set_kind(self.draft, kind)

    def set_line(self, slot: int, value: str) -> None:
        Composer.set_line(self.draft, slot, value)

    def set_author(self, author: str) -> None:
        self.draft.author = author

    def can_submit(self) -> bool:
        return Composer.can_submit(self.draft.kind, self.draft)

    def cancel(self) -> None:
        Composer.reset(self.draft, retain_position=False)

    def save_signature(self, name: str) -> str:
        return self.signatures.save(name)

    def can_mutate(self, poem: Poem) -> bool:
        return AuthService.can_mutate(poem, self.identity)

    # --- Действия ---

    @staticmethod
    def _failure(e: PoemError) -> ActionResult:
        return ActionResult(success=False, message=e.message)

    def _require_poem(self, poem_id: PoemId) -> Poem:
        poem = self.reconciler.find(poem_id)
        if poem is None:
            raise PoemNotFound()
        return poem

    async def refresh(self) -> ActionResult:
        try:
            poems = await self.service.list_poems()
        except PoemError as e:
            return self._failure(e)
        self.reconciler.replace_all(poems)
        return ActionResult(success=True, message=f"{len(poems)}首の歌を読み込みました。")

    async def submit(self) -> ActionResult:
        identity = self.identity
        try:
            author = Composer.resolve_author(
                self.draft, identity, self.signatures.signature, self.anonymous_signature
            )
            poem_in = Composer.build_submission(self.draft, author)
            poem = await self.service.create_poem(poem_in, identity.handle if identity else None)
        except PoemError as e:
            return self._failure(e)
        self.reconciler.upsert_front(poem)
        Composer.reset(self.draft, retain_position=self.retain_position)
        return ActionResult(success=True, message="この場所に歌を詠みました。", poem=poem)

    async def edit(self, poem_id: PoemId, new_text: str) -> ActionResult:
        try:
            poem = self._require_poem(poem_id)
            AuthService.ensure_can_mutate(poem, self.identity)
            text = Composer.validate_text(poem.kind, new_text)
            updated = await self.service.update_text(poem_id, text)
        except PoemError as e:
            return self._failure(e)
        self.reconciler.upsert_by_id(updated)
        return ActionResult(success=True, message="歌を修正しました。", poem=updated)

    async def delete(self, poem_id: PoemId) -> ActionResult:
        try:
            poem = self._require_poem(poem_id)
            AuthService.ensure_can_mutate(poem, self.identity)
            await self.service.delete_poem(poem_id)
        except PoemError as e:
            return self._failure(e)
        self.reconciler.remove_by_id(poem_id)
        return ActionResult(success=True, message="歌を削除しました。")

    async def toggle_appreciation(self, poem_id: PoemId) -> ActionResult:
        try:
            poem = self._require_poem(poem_id)
            action, next_set = AppreciationService.toggle(poem, self.identity)
            updated = await self.service.update_appreciation(poem_id, next_set)
        except PoemError as e:
            return self._failure(e)
        self.reconciler.upsert_by_id(updated)
        message = "いとをかし" if action == 'appreciated' else "いとをかしを取り消しました。"
        return ActionResult(success=True, message=message, poem=updated)
