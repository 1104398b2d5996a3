from .identity import Identity, MeResponse
from .poems import (
    PoemKind, Position, Poem, PoemId, CompositionDraft, PoemCreate,
    PoemComposeRequest, PoemTextUpdate, ActionResult, normalize_poem_text,
)

__all__ = [
    "Identity", "MeResponse",
    "PoemKind", "Position", "Poem", "PoemId", "CompositionDraft", "PoemCreate",
    "PoemComposeRequest", "PoemTextUpdate", "ActionResult", "normalize_poem_text",
]
