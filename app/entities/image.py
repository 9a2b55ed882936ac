import base64
from dataclasses import dataclass

from app.exceptions import ImageValidationError

# Gemini returns its generated images as PNG.
GENERATED_IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class ImagePayload:
    """One decoded image: raw bytes plus the declared MIME type."""

    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ImageValidationError("Invalid image: payload is empty.")
        if not self.mime_type.lower().startswith("image/"):
            raise ImageValidationError(
                f"Invalid file type '{self.mime_type}'. Please upload an image."
            )

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str) -> "ImagePayload":
        return cls(data=base64.b64decode(encoded), mime_type=mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def __repr__(self) -> str:
        return f"ImagePayload(mime_type={self.mime_type!r}, size={len(self.data)})"
