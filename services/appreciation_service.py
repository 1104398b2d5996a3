from typing import Iterable, List, Optional, Tuple

from schemas.identity import Identity
from schemas.poems import Poem
from services.auth_service import AuthService


class AppreciationService:
    @staticmethod
    def next_appreciation(current: Iterable[str], actor: str) -> List[str]:
        """Переключает «いとをかし»: убирает actor, если он уже есть, иначе добавляет."""
        handles = list(dict.fromkeys(current))
        if actor in handles:
            handles.remove(actor)
        else:
            handles.append(actor)
        return handles

    @staticmethod
    def toggle(poem: Poem, identity: Optional[Identity]) -> Tuple[str, List[str]]:
        """Возвращает действие ('appreciated' или 'unappreciated') и новый набор."""
        actor = AuthService.require_identity(identity).handle
        action = 'unappreciated' if poem.is_appreciated_by(actor) else 'appreciated'
        return action, AppreciationService.next_appreciation(poem.appreciated_by, actor)
