import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from app.entities.image import ImagePayload
from app.exceptions import ImageValidationError

_logger = logging.getLogger(__name__)


def detect_mime_type(data: bytes) -> str:
    """
    Sniff the MIME type of raw image bytes with Pillow.

    Raises:
        ImageValidationError: If the bytes are not a recognizable image
    """
    try:
        with Image.open(BytesIO(data)) as img:
            img_format = img.format
    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError(
            "Invalid file type. Please upload an image."
        ) from e

    mime_type = Image.MIME.get(img_format or "")
    if not mime_type:
        raise ImageValidationError(f"Invalid image format: {img_format}")
    return mime_type


def image_from_bytes(data: bytes, mime_type: str | None = None) -> ImagePayload:
    """Build a payload, sniffing the MIME type when none is declared."""
    return ImagePayload(data=data, mime_type=mime_type or detect_mime_type(data))


def load_image(path: str | Path) -> ImagePayload:
    """Read an image file from disk into an ImagePayload."""
    file_path = Path(path)
    if not file_path.is_file():
        raise ImageValidationError(f"Image file not found: {file_path}")

    payload = image_from_bytes(file_path.read_bytes())
    _logger.debug(
        "Loaded %s (%s, %d bytes)", file_path, payload.mime_type, len(payload.data)
    )
    return payload
