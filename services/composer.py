from typing import Optional

from core.errors import ValidationFailed
from schemas.identity import Identity
from schemas.poems import (
    LINE_SEPARATOR, MAX_SLOTS, CompositionDraft, PoemCreate, PoemKind, Position,
    normalize_poem_text,
)
from services.identity_service import IdentityResolver


class Composer:
    @staticmethod
    def set_line(draft: CompositionDraft, slot: int, value: str) -> None:
        """Сохраняет значение слота 1..5 как есть; обрезка пробелов происходит при чтении."""
        if not 1 <= slot <= MAX_SLOTS:
            raise ValueError(f"slot must be between 1 and {MAX_SLOTS}, got {slot}")
        draft.lines[slot - 1] = value

    @staticmethod
    def set_kind(draft: CompositionDraft, kind: PoemKind) -> None:
        draft.kind = kind

    @staticmethod
    def set_position(draft: CompositionDraft, lat: float, lon: float) -> None:
        draft.position = Position(lat=lat, lon=lon)

    @staticmethod
    def can_submit(kind: PoemKind, draft: CompositionDraft) -> bool:
        if draft.position is None:
            return False
        # Слот - это ровно одна строка стиха
        return all(
            line.strip() and LINE_SEPARATOR not in line.strip()
            for line in draft.lines[:kind.line_count]
        )

    @staticmethod
    def build_text(kind: PoemKind, draft: CompositionDraft) -> str:
        return LINE_SEPARATOR.join(line.strip() for line in draft.lines[:kind.line_count])

    @staticmethod
    def reset(draft: CompositionDraft, retain_position: bool) -> None:
        draft.lines = [""] * MAX_SLOTS
        if not retain_position:
            draft.position = None

    @staticmethod
    def resolve_author(
        draft: CompositionDraft,
        identity: Optional[Identity],
        local_signature: str = "",
        anonymous: str = "",
    ) -> str:
        """Подпись: явная из черновика, затем имя пользователя, затем локальная, затем анонимная."""
        for candidate in (
            draft.author,
            IdentityResolver.default_signature(identity),
            local_signature,
            anonymous,
        ):
            if candidate and candidate.strip():
                return candidate.strip()
        return ""

    @staticmethod
    def build_submission(draft: CompositionDraft, author: str) -> PoemCreate:
        if not Composer.can_submit(draft.kind, draft):
            raise ValidationFailed()
        try:
            return PoemCreate(
                kind=draft.kind,
                text=Composer.build_text(draft.kind, draft),
                author=author,
                position=draft.position,
            )
        except ValueError:
            raise ValidationFailed() from None

    @staticmethod
    def validate_text(kind: PoemKind, text: str) -> str:
        """Проверяет исправленный текст: то же число строк, ни одной пустой."""
        try:
            return normalize_poem_text(kind, text)
        except ValueError:
            raise ValidationFailed(
                f"{'俳句' if kind is PoemKind.HAIKU else '短歌'}は{kind.line_count}行で入力してください。"
            ) from None
