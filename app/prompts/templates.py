"""Instruction texts sent to the image model."""

NO_ADDITIONAL_INSTRUCTIONS = "No additional instructions."


ANGLE_PREAMBLE = (
    "You are a professional product photographer. Your task is to take a single "
    "product packshot and generate an additional, photorealistic image of the "
    "*same product* from a *completely different angle*. It is absolutely critical "
    "that you preserve the exact label design, text, cap, glass material, and "
    "liquid color. The background MUST be a neutral studio gray. Do not just "
    "return the original image. Here is the packshot:"
)

# Order defines the order of the generated angle images.
ANGLE_INSTRUCTIONS: tuple[str, ...] = (
    "Your specific task: Generate a new image of this bottle from a **three-quarter "
    "view from the right**. The bottle should be rotated about 45 degrees to the "
    "left from the original position.",
    "Your specific task: Generate a new image of this bottle from a **direct side "
    "profile view (90-degree turn)**. Show the bottle as if it has been rotated "
    "exactly 90 degrees.",
    "Your specific task: Generate a new image of this bottle from a **high angle, "
    "looking down at the cap and shoulders** of the bottle. This should be a clear "
    "top-down perspective.",
    "Your specific task: Generate a new image of this bottle from a **dramatic low "
    "angle, looking up from below the base**. The perspective should be from the "
    "ground up.",
)


STYLE_REFERENCE_PREAMBLE = (
    "You are an expert art director. Your task is to generate a new scene based on "
    "multiple inputs. First, observe the following images for style reference. You "
    "must capture their collective essence (mood, lighting, color, and composition) "
    "to define the art direction for the final image."
)

STYLE_OBJECT_PREAMBLE = (
    "Next, here is a full set of product images showing the new bottle from "
    "multiple angles. It is CRITICAL that you use ALL of these images as a "
    "comprehensive 3D reference to accurately render the bottle, which MUST be the "
    "central subject of the new scene you create."
)

STYLE_FINAL_INSTRUCTION = (
    "Now, generate a completely new and unique photorealistic scene that places "
    "the product bottle (using the multi-angle reference) within an environment "
    "that perfectly matches the art direction established by ALL of the style "
    "reference images. Do not copy elements from the reference scenes directly; "
    "create a new composition. Apply the user's additional instructions if "
    'provided: "{user_prompt}"'
)


SWAP_SCENE_PREAMBLE = (
    "You are an expert photo editor. Your task is to perform a photorealistic "
    "bottle swap. First, here is the reference scene. The goal is to replace the "
    "bottle within this scene."
)

SWAP_OBJECT_PREAMBLE = (
    "Next, here is a full set of product images showing the new product bottle "
    "from multiple angles. It is CRITICAL that you use ALL of these images as a "
    "comprehensive 3D reference to accurately render the bottle that must be "
    "placed into the scene."
)

SWAP_FINAL_INSTRUCTION = (
    "Now, seamlessly integrate the new bottle into the reference scene. The "
    "original bottle must be completely removed. The new bottle must be placed at "
    "an angle that is natural for the scene, using the provided multi-angle "
    "references to render it accurately while preserving its exact shape, label, "
    "and liquid color. Match the scene's lighting, shadows, and reflections for a "
    "photorealistic result. Apply the user's additional instructions if they are "
    'relevant: "{user_prompt}"'
)
