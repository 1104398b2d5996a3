from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LINE_SEPARATOR = "\n"
MAX_SLOTS = 5

PoemId = int


class PoemKind(str, Enum):
    HAIKU = "haiku"
    TANKA = "tanka"

    @property
    def line_count(self) -> int:
        return 3 if self is PoemKind.HAIKU else 5


def normalize_poem_text(kind: PoemKind, text: str) -> str:
    """Проверяет текст стиха и возвращает его с обрезанными строками."""
    lines = [line.strip() for line in text.split(LINE_SEPARATOR)]
    if len(lines) != kind.line_count:
        raise ValueError(f"{kind.value} must have exactly {kind.line_count} lines, got {len(lines)}")
    if not all(lines):
        raise ValueError("every line must be non-empty")
    return LINE_SEPARATOR.join(lines)


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class Poem(BaseModel):
    """Стих в том виде, в каком его вернула база."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: PoemId
    kind: PoemKind
    text: str
    position: Position
    author: str = ""
    owner_id: Optional[str] = None
    created_at: datetime
    appreciated_by: List[str] = Field(default_factory=list, alias="likes")

    @model_validator(mode="before")
    @classmethod
    def from_record(cls, data):
        # Запись из Supabase хранит координаты плоско, а likes может быть null
        if isinstance(data, dict):
            data = dict(data)
            if "position" not in data and "lat" in data and "lon" in data:
                data["position"] = {"lat": data.pop("lat"), "lon": data.pop("lon")}
            for key in ("likes", "appreciated_by"):
                if key in data and data[key] is None:
                    data[key] = []
            text = data.get("text")
            if isinstance(text, str):
                # Старые записи хранят переводы строк экранированными
                if LINE_SEPARATOR not in text:
                    text = text.replace("\\n", LINE_SEPARATOR)
                data["text"] = LINE_SEPARATOR.join(line.strip() for line in text.split(LINE_SEPARATOR))
            if data.get("author") is None:
                data["author"] = ""
        return data

    @field_validator("appreciated_by")
    @classmethod
    def unique_handles(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def check_text(self):
        normalize_poem_text(self.kind, self.text)
        return self

    @property
    def lines(self) -> List[str]:
        return self.text.split(LINE_SEPARATOR)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def appreciation_count(self) -> int:
        return len(self.appreciated_by)

    def is_appreciated_by(self, handle: Optional[str]) -> bool:
        return handle is not None and handle in self.appreciated_by


class CompositionDraft(BaseModel):
    """Незавершённое сочинение: форма, пять слотов строк, подпись и точка на карте."""
    kind: PoemKind = PoemKind.HAIKU
    lines: List[str] = Field(default_factory=lambda: [""] * MAX_SLOTS)
    author: str = ""
    position: Optional[Position] = None


class PoemCreate(BaseModel):
    kind: PoemKind
    text: str
    author: str
    position: Position

    @model_validator(mode="after")
    def check_text(self):
        self.text = normalize_poem_text(self.kind, self.text)
        return self

    def to_record(self, owner_id: Optional[str]) -> dict:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "author": self.author,
            "lat": self.position.lat,
            "lon": self.position.lon,
            "owner_id": owner_id,
            "likes": [],
        }


class PoemComposeRequest(BaseModel):
    kind: PoemKind = PoemKind.HAIKU
    lines: List[str] = Field(max_length=MAX_SLOTS)
    author: str = ""
    lat: float
    lon: float


class PoemTextUpdate(BaseModel):
    text: str


class ActionResult(BaseModel):
    success: bool
    message: str
    poem: Optional[Poem] = None
