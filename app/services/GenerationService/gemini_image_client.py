"""
Gemini image generation client.

One call = one generateContent request with image-only response modality,
retried with exponential backoff. The first inline image in the first
candidate is the result.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from google.genai import types

from app.entities.image import GENERATED_IMAGE_MIME_TYPE, ImagePayload
from app.entities.prompt import ImagePart, PromptPart, TextPart
from app.exceptions import (
    ContentBlockedError,
    EmptyImageResponseError,
    ImageValidationError,
)
from app.services.GenerationService.generation_client_interface import (
    GenerationClientInterface,
)
from app.utils.retry import RetryPolicy, retry_with_backoff

if TYPE_CHECKING:
    from google.genai import Client


DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"

# finishReason values that mean the model refused the content; a retry
# would return the same refusal.
BLOCKING_FINISH_REASONS = frozenset(
    {
        "PROHIBITED_CONTENT",
        "BLOCKLIST",
        "SPII",
        "IMAGE_SAFETY",
        "RECITATION",
    }
)


def _enum_name(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value)).upper()


def to_sdk_part(part: PromptPart) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.content)
    if isinstance(part, ImagePart):
        return types.Part.from_bytes(
            data=part.payload.data, mime_type=part.payload.mime_type
        )
    raise TypeError(f"Unsupported prompt part: {type(part).__name__}")


def extract_image(response: types.GenerateContentResponse) -> ImagePayload:
    """
    Return the first inline image of the first candidate.

    Raises:
        ContentBlockedError: The prompt or the response was blocked
        EmptyImageResponseError: No part carries image data
    """
    prompt_feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(prompt_feedback, "block_reason", None)
    if block_reason:
        reason = _enum_name(block_reason)
        raise ContentBlockedError(f"Request blocked by the model: {reason}", reason)

    candidates = response.candidates or []
    if candidates:
        candidate = candidates[0]
        finish_reason = _enum_name(candidate.finish_reason)
        if finish_reason in BLOCKING_FINISH_REASONS:
            raise ContentBlockedError(
                f"Image generation stopped by the model: {finish_reason}",
                finish_reason,
            )

        parts = candidate.content.parts if candidate.content else None
        for part in parts or []:
            inline = part.inline_data
            if inline is None or not inline.data:
                continue
            data = inline.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return ImagePayload(
                data=data, mime_type=inline.mime_type or GENERATED_IMAGE_MIME_TYPE
            )

    raise EmptyImageResponseError("No image data found in the API response.")


class GeminiImageClient(GenerationClientInterface):
    """Generation client backed by the google-genai async API."""

    def __init__(
        self,
        client: Client,
        logger: logging.Logger,
        model_name: str = DEFAULT_IMAGE_MODEL,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.logger = logger
        self.model_name = model_name
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=3, initial_delay=2.0, backoff_multiplier=2.0
        )
        self._sleep = sleep
        self._config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
        )

        self.logger.info(
            "GeminiImageClient initialized. Model: %s, max attempts: %d",
            self.model_name,
            self.retry_policy.max_attempts,
        )

    async def _request_once(self, contents: list[types.Content]) -> ImagePayload:
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=contents,
            config=self._config,
        )
        return extract_image(response)

    async def generate_image(self, parts: Sequence[PromptPart]) -> ImagePayload:
        if not parts:
            raise ImageValidationError("Invalid request: no prompt parts to send.")

        contents = [
            types.Content(role="user", parts=[to_sdk_part(part) for part in parts])
        ]

        return await retry_with_backoff(
            lambda: self._request_once(contents),
            self.retry_policy,
            sleep=self._sleep,
            logger=self.logger,
        )
