import logging
from typing import Any, Dict, List, Optional, Type

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from supabase import Client, PostgrestAPIError

from core.config import settings
from core.errors import PoemError, PoemNotFound, QueryFailed, StoreUnavailable, WriteRejected
from schemas.poems import Poem, PoemCreate, PoemId

logger = logging.getLogger(__name__)


class PoemService:
    """Шлюз к таблице стихов в Supabase.

    Все операции асинхронные: синхронный клиент выполняется в пуле потоков.
    Ошибки базы переводятся в ошибки из ``core.errors``; локальный список
    стихов здесь не трогается.
    """

    def __init__(self, db: Client, table: Optional[str] = None):
        self.db = db
        self.table = table or settings.POEM_TABLE

    async def _execute(self, query, operation: str, failure: Type[PoemError], poem_id: PoemId = None) -> List[Dict[str, Any]]:
        try:
            response = await run_in_threadpool(query.execute)
        except PostgrestAPIError as e:
            logger.warning("Supabase rejected %s (poem %s): %s", operation, poem_id, e.message)
            raise failure() from e
        except (httpx.HTTPError, ConnectionError) as e:
            logger.warning("Supabase unavailable during %s (poem %s): %s", operation, poem_id, e)
            raise StoreUnavailable() from e
        return response.data or []

    @staticmethod
    def parse_poem(record: Dict[str, Any], failure: Type[PoemError] = QueryFailed) -> Poem:
        """Проверяет запись из базы; внутренний код видит только Poem."""
        try:
            return Poem.model_validate(record)
        except ValidationError as e:
            logger.warning("Malformed poem record %s: %s", record.get("id"), e)
            raise failure("不正な形式の歌を受信しました。") from e

    @staticmethod
    def parse_poems(records: List[Dict[str, Any]]) -> List[Poem]:
        """Разбирает список записей; битая запись пропускается, а не роняет весь список."""
        poems = []
        for record in records:
            try:
                poems.append(Poem.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping malformed poem record %s: %s", record.get("id"), e)
        return poems

    async def list_poems(self) -> List[Poem]:
        """Все стихи, новые первыми."""
        query = self.db.table(self.table).select("*").order("created_at", desc=True)
        return self.parse_poems(await self._execute(query, "list", QueryFailed))

    async def get_poem(self, poem_id: PoemId) -> Poem:
        query = self.db.table(self.table).select("*").eq("id", poem_id)
        records = await self._execute(query, "get", QueryFailed, poem_id)
        if not records:
            raise PoemNotFound()
        return self.parse_poem(records[0])

    async def create_poem(self, poem_in: PoemCreate, owner_id: Optional[str]) -> Poem:
        query = self.db.table(self.table).insert(poem_in.to_record(owner_id))
        records = await self._execute(query, "create", WriteRejected)
        if not records:
            raise WriteRejected("歌を投稿できませんでした。")
        poem = self.parse_poem(records[0], WriteRejected)
        logger.info("Poem %s created by %s", poem.id, owner_id)
        return poem

    async def _update(self, poem_id: PoemId, update_data: Dict[str, Any], operation: str) -> Poem:
        query = self.db.table(self.table).update(update_data).eq("id", poem_id)
        records = await self._execute(query, operation, WriteRejected, poem_id)
        # Политика RLS не даёт ошибку, а просто не обновляет ни одной строки
        if not records:
            logger.warning("Supabase updated no rows for %s (poem %s)", operation, poem_id)
            raise WriteRejected("歌を更新できませんでした。")
        return self.parse_poem(records[0], WriteRejected)

    async def update_text(self, poem_id: PoemId, new_text: str) -> Poem:
        poem = await self._update(poem_id, {"text": new_text}, "update_text")
        logger.info("Poem %s text updated", poem_id)
        return poem

    async def update_appreciation(self, poem_id: PoemId, next_set: List[str]) -> Poem:
        return await self._update(poem_id, {"likes": list(next_set)}, "update_appreciation")

    async def delete_poem(self, poem_id: PoemId) -> None:
        """Удаляет стих. Повторное удаление - ошибка, а не пустая операция."""
        query = self.db.table(self.table).delete().eq("id", poem_id)
        records = await self._execute(query, "delete", WriteRejected, poem_id)
        if not records:
            logger.warning("Supabase deleted no rows (poem %s)", poem_id)
            raise WriteRejected("歌を削除できませんでした。")
        logger.info("Poem %s deleted", poem_id)
