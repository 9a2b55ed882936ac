from typing import Literal, TypedDict

from app.entities.image import ImagePayload

GenerationMode = Literal["simple", "complex"]


class HistoryEntry(TypedDict):
    """A saved result set from one scene generation."""

    id: str
    timestamp: int
    mode: GenerationMode
    images: list[ImagePayload]
    prompt: str | None
