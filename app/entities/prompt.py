from dataclasses import dataclass

from app.entities.image import ImagePayload


@dataclass(frozen=True)
class TextPart:
    """Instruction text sent to the model."""

    content: str


@dataclass(frozen=True)
class ImagePart:
    """An inline image sent to the model."""

    payload: ImagePayload


# The model reads parts as one interleaved narrative, so sequence order matters.
PromptPart = TextPart | ImagePart
