import logging
from typing import Optional

from supabase import create_client, Client

from core.config import settings
from core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_db() -> Client:
    """Возвращает экземпляр клиента Supabase, создавая его при первом вызове."""
    global _client
    if _client is None:
        # Без переменных окружения приложение не падает, а сообщает об этом
        if not settings.SUPABASE_CONFIGURED:
            logger.error("Supabase env missing: set SUPABASE_URL and SUPABASE_KEY in the .env file")
            raise StoreUnavailable("データベースが設定されていません。")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client
