"""
Image loading utilities

Reads image bytes from a path and decodes them into a PixelBuffer that
keeps the EXIF orientation tag (pixels are left in stored order).
"""

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .base import OrientationTag, PixelBuffer
from .config import FILE_SCHEME_PREFIX
from .errors import DecodeError, InvalidInputError

logger = logging.getLogger(__name__)

EXIF_ORIENTATION = 0x0112


def resolve_image_path(image_path: str) -> Path:
    """
    Turn a caller-supplied path into a filesystem path

    Args:
        image_path: Plain path or file:// URL

    Returns:
        Path with any file:// prefix removed

    Raises:
        InvalidInputError: If the path is missing or empty
    """
    if not image_path or not isinstance(image_path, str):
        raise InvalidInputError("You must include the image path")

    if image_path.startswith(FILE_SCHEME_PREFIX):
        image_path = image_path[len(FILE_SCHEME_PREFIX):]

    if not image_path:
        raise InvalidInputError("You must include the image path")
    return Path(image_path)


def _target_mode(image: Image.Image) -> str:
    if image.mode in ("1", "L"):
        return "L"
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        return "RGBA"
    return "RGB"


def decode_image(data: bytes) -> PixelBuffer:
    """
    Decode image bytes with Pillow

    Args:
        data: Encoded image (JPEG, PNG, ...)

    Returns:
        PixelBuffer in stored orientation, tagged from EXIF

    Raises:
        DecodeError: If Pillow cannot decode the bytes
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            orientation = OrientationTag.from_exif(image.getexif().get(EXIF_ORIENTATION))
            mode = _target_mode(image)
            pixels = np.array(image.convert(mode))
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image: {e}", cause=e) from e

    if pixels.size == 0:
        raise DecodeError("Failed to decode image: empty raster")

    return PixelBuffer.from_array(pixels, orientation=orientation, pixel_format=mode)


def load_image(image_path: str) -> PixelBuffer:
    """
    Load and decode an image file

    Args:
        image_path: Plain path or file:// URL

    Returns:
        PixelBuffer in stored orientation

    Raises:
        InvalidInputError: If the path is empty
        DecodeError: If the file cannot be read or decoded
    """
    path = resolve_image_path(image_path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Failed to load image: {path} ({e})", cause=e) from e

    buffer = decode_image(data)
    logger.debug(
        "Loaded %s: %dx%d %s, orientation %s",
        path, buffer.width, buffer.height, buffer.pixel_format, buffer.orientation.name,
    )
    return buffer
