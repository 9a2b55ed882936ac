"""
GenerationService: the two generation use-cases plus the simple/complex workflow.

Every use-case either returns a complete, ordered result set or raises a single
GenerationError; input problems raise ImageValidationError before any API call.
"""

import logging
from collections.abc import Sequence
from functools import partial

from langfuse import observe

from app.entities.history import GenerationMode
from app.entities.image import GENERATED_IMAGE_MIME_TYPE, ImagePayload
from app.exceptions import GenerationError, ImageValidationError
from app.prompts import compose_angle_requests, compose_scene_request
from app.repositories.history_repository.history_repository_interface import (
    HistoryRepositoryInterface,
)
from app.services.GenerationService.fan_out import fan_out, fan_out_replicated
from app.services.GenerationService.generation_client_interface import (
    GenerationClientInterface,
)
from app.services.GenerationService.generation_service_interface import (
    GenerationServiceInterface,
)

GENERATION_MODES: tuple[GenerationMode, ...] = ("simple", "complex")


class GenerationService(GenerationServiceInterface):
    def __init__(
        self,
        client: GenerationClientInterface,
        logger: logging.Logger,
        history_repository: HistoryRepositoryInterface | None = None,
        output_count: int = 4,
    ) -> None:
        """
        Args:
            client: Single-call image generation client (retries internally)
            logger: Logger instance
            history_repository: Where finished scene generations are saved
            output_count: Variations per scene generation
        """
        if output_count < 1:
            raise ValueError("output_count must be at least 1")
        self.client = client
        self.logger = logger
        self.history_repository = history_repository
        self.output_count = output_count

    @observe()
    async def generate_bottle_angles(self, packshot: ImagePayload) -> list[ImagePayload]:
        if packshot is None:
            raise ImageValidationError("Please upload a packshot first.")

        requests = compose_angle_requests(packshot)
        self.logger.info("Generating %d bottle angles", len(requests))

        try:
            images = await fan_out(
                [partial(self.client.generate_image, parts) for parts in requests]
            )
        except Exception as e:
            self.logger.error("Error generating bottle angles: %s", e, exc_info=True)
            raise GenerationError(f"Failed to generate bottle angles: {e}") from e

        return [
            ImagePayload(data=image.data, mime_type=GENERATED_IMAGE_MIME_TYPE)
            for image in images
        ]

    @observe()
    async def generate_composite(
        self,
        reference_images: Sequence[ImagePayload],
        object_images: Sequence[ImagePayload],
        user_prompt: str,
        style_only: bool,
        output_count: int = 4,
    ) -> list[ImagePayload]:
        if not object_images or any(image is None for image in object_images):
            raise ImageValidationError("Please ensure all required images are uploaded.")
        if not reference_images or any(image is None for image in reference_images):
            raise ImageValidationError(
                "Please upload a reference scene or at least one style image."
            )
        if output_count < 1:
            raise ValueError("output_count must be at least 1")

        parts = compose_scene_request(
            reference_images, object_images, user_prompt or "", style_only
        )
        self.logger.info(
            "Generating %d composites (style_only=%s, references=%d, objects=%d)",
            output_count,
            style_only,
            len(reference_images),
            len(object_images),
        )

        try:
            return await fan_out_replicated(
                partial(self.client.generate_image, parts), output_count
            )
        except Exception as e:
            self.logger.error("Error generating images: %s", e, exc_info=True)
            raise GenerationError(f"Failed to generate images: {e}") from e

    @observe()
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
        if mode not in GENERATION_MODES:
            raise ValueError(f"Unknown generation mode: {mode}")
        if packshot is None:
            raise ImageValidationError("Please upload a packshot first.")

        if mode == "complex":
            if angle_images is None:
                angle_images = await self.generate_bottle_angles(packshot)
            object_images = [packshot, *angle_images]
        else:
            object_images = [packshot]

        images = await self.generate_composite(
            reference_images,
            object_images,
            user_prompt,
            style_only,
            self.output_count if output_count is None else output_count,
        )
        self._record_history(mode, images, user_prompt)
        return images

    def _record_history(
        self, mode: GenerationMode, images: list[ImagePayload], user_prompt: str
    ) -> None:
        if self.history_repository is None:
            return
        try:
            entry = self.history_repository.add_entry(
                mode, images, user_prompt.strip() or None
            )
            self.logger.info("Saved generation %s to history", entry["id"])
        except Exception as e:
            self.logger.warning("Failed to save generation to history: %s", e)
