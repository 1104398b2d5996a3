import json
import logging
import os
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileKeyValueStore:
    """Хранит пары ключ-значение в одном JSON-файле на устройстве."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cannot read signature store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)


class SignatureService:
    """Локальная подпись («あなたの署名»), хранящаяся между сессиями без аккаунта."""

    def __init__(self, store: KeyValueStore, namespace: str):
        self.store = store
        self.key = f"{namespace}_myName"
        self.signature = ""

    def load(self) -> str:
        self.signature = (self.store.get(self.key) or "").strip()
        return self.signature

    def save(self, name: str) -> str:
        self.signature = name.strip()
        self.store.set(self.key, self.signature)
        return self.signature
