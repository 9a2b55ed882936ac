from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.entities.image import ImagePayload
from app.entities.prompt import PromptPart


class GenerationClientInterface(ABC):
    @abstractmethod
    async def generate_image(self, parts: Sequence[PromptPart]) -> ImagePayload:
        """Send one ordered part sequence and return the single generated image."""
