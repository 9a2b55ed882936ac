from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.entities.history import GenerationMode
from app.entities.image import ImagePayload


class GenerationServiceInterface(ABC):
    @abstractmethod
    async def generate_bottle_angles(self, packshot: ImagePayload) -> list[ImagePayload]:
        """Return four new views of the packshot bottle, in fixed angle order."""

    @abstractmethod
    async def generate_composite(
        self,
        reference_images: Sequence[ImagePayload],
        object_images: Sequence[ImagePayload],
        user_prompt: str,
        style_only: bool,
        output_count: int = 4,
    ) -> list[ImagePayload]:
        """
        Composite the bottle into the reference scene (or a new scene in the
        style of the references) and return ``output_count`` variations.
        """

    @abstractmethod
    async def generate_scene(
        self,
        mode: GenerationMode,
        packshot: ImagePayload,
        reference_images: Sequence[ImagePayload],
        user_prompt: str = "",
        style_only: bool = False,
        angle_images: Sequence[ImagePayload] | None = None,
        output_count: int | None = None,
    ) -> list[ImagePayload]:
        """
        Run a full simple or complex workflow and record it in the history.

        In complex mode the angle images (generated first when not supplied)
        join the packshot as product references.
        """
