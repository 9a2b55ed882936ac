"""
Builds the ordered part sequences sent to the image model.

Each image group is preceded by the text that tells the model what role the
group plays (style reference, scene, or multi-angle product reference).
"""

from collections.abc import Sequence

from app.entities.image import ImagePayload
from app.entities.prompt import ImagePart, PromptPart, TextPart
from app.prompts.templates import (
    ANGLE_INSTRUCTIONS,
    ANGLE_PREAMBLE,
    NO_ADDITIONAL_INSTRUCTIONS,
    STYLE_FINAL_INSTRUCTION,
    STYLE_OBJECT_PREAMBLE,
    STYLE_REFERENCE_PREAMBLE,
    SWAP_FINAL_INSTRUCTION,
    SWAP_OBJECT_PREAMBLE,
    SWAP_SCENE_PREAMBLE,
)


def compose_angle_requests(packshot: ImagePayload) -> list[list[PromptPart]]:
    """One sequence per fixed camera angle, in ANGLE_INSTRUCTIONS order."""
    return [
        [
            TextPart(ANGLE_PREAMBLE),
            ImagePart(packshot),
            TextPart(instruction),
        ]
        for instruction in ANGLE_INSTRUCTIONS
    ]


def _user_instructions(user_prompt: str) -> str:
    return user_prompt if user_prompt.strip() else NO_ADDITIONAL_INSTRUCTIONS


def compose_scene_request(
    reference_images: Sequence[ImagePayload],
    object_images: Sequence[ImagePayload],
    user_prompt: str,
    style_only: bool,
) -> list[PromptPart]:
    """
    Build the single sequence used for every composite variation.

    Args:
        reference_images: Scene to edit, or style references when style_only
        object_images: Packshot plus any extra views of the new bottle
        user_prompt: Free text appended verbatim to the final instruction
        style_only: Treat references as mood/lighting only and invent a new scene

    Returns:
        [preamble, *references, object preamble, *objects, final instruction]
    """
    if style_only:
        reference_preamble = STYLE_REFERENCE_PREAMBLE
        object_preamble = STYLE_OBJECT_PREAMBLE
        final_template = STYLE_FINAL_INSTRUCTION
    else:
        reference_preamble = SWAP_SCENE_PREAMBLE
        object_preamble = SWAP_OBJECT_PREAMBLE
        final_template = SWAP_FINAL_INSTRUCTION

    parts: list[PromptPart] = [TextPart(reference_preamble)]
    parts.extend(ImagePart(image) for image in reference_images)
    parts.append(TextPart(object_preamble))
    parts.extend(ImagePart(image) for image in object_images)
    parts.append(
        TextPart(final_template.format(user_prompt=_user_instructions(user_prompt)))
    )
    return parts
