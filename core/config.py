import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Supabase
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")
    POEM_TABLE = os.getenv("POEM_TABLE", "poems")

    # JWT, выданный Supabase Auth
    SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

    # Локальная подпись
    SIGNATURE_NAMESPACE = os.getenv("SIGNATURE_NAMESPACE", "chizurashi")
    SIGNATURE_STORE_PATH = os.getenv("SIGNATURE_STORE_PATH", ".chizurashi_signature.json")
    ANONYMOUS_SIGNATURE = os.getenv("ANONYMOUS_SIGNATURE", "無署名")

    # Сохранять ли выбранную точку на карте после отправки
    RETAIN_POSITION_AFTER_SUBMIT = _env_bool("RETAIN_POSITION_AFTER_SUBMIT", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @property
    def SUPABASE_CONFIGURED(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

settings = Settings()
