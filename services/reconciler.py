import logging
from typing import Iterable, List, Optional, Tuple

from schemas.poems import Poem, PoemId

logger = logging.getLogger(__name__)


class PoemListReconciler:
    """Упорядоченный список стихов в памяти, новые первыми.

    Меняется только по подтверждённым ответам базы. Порядок меняет лишь
    создание; обновления заменяют запись на её прежнем месте.
    """

    def __init__(self, poems: Iterable[Poem] = ()):
        self._poems: List[Poem] = list(poems)

    @property
    def poems(self) -> Tuple[Poem, ...]:
        return tuple(self._poems)

    def __len__(self) -> int:
        return len(self._poems)

    def index_of(self, poem_id: PoemId) -> Optional[int]:
        for index, poem in enumerate(self._poems):
            if poem.id == poem_id:
                return index
        return None

    def find(self, poem_id: PoemId) -> Optional[Poem]:
        index = self.index_of(poem_id)
        return self._poems[index] if index is not None else None

    def replace_all(self, poems: Iterable[Poem]) -> None:
        self._poems = list(poems)

    def upsert_front(self, poem: Poem) -> None:
        index = self.index_of(poem.id)
        if index is not None:
            del self._poems[index]
        self._poems.insert(0, poem)

    def upsert_by_id(self, poem: Poem) -> bool:
        index = self.index_of(poem.id)
        if index is None:
            # Стих уже удалён из списка; ответ опоздал
            logger.debug("Ignoring update for poem %s missing from the list", poem.id)
            return False
        self._poems[index] = poem
        return True

    def remove_by_id(self, poem_id: PoemId) -> bool:
        index = self.index_of(poem_id)
        if index is None:
            return False
        del self._poems[index]
        return True
