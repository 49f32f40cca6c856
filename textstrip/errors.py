"""Error kinds reported by a recognition request"""

from __future__ import annotations

from typing import Optional


class TextRecognitionError(RuntimeError):
    """Base class for every terminal request failure"""

    code = "ERR"

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:  # pragma: no cover - simple formatter
        if self.cause:
            return f"{super().__str__()} (cause={self.cause})"
        return super().__str__()


class InvalidInputError(TextRecognitionError):
    """Missing image path or malformed options"""

    code = "INVALID_INPUT"


class DecodeError(TextRecognitionError):
    """Image bytes could not be read or decoded"""

    code = "DECODE_ERROR"


class OrientationError(TextRecognitionError):
    """Upright raster could not be rendered"""

    code = "ORIENTATION_ERROR"


class CropError(TextRecognitionError):
    """Crop rectangle is degenerate or the buffer is not upright"""

    code = "CROP_ERROR"


class EngineError(TextRecognitionError):
    """Recognition engine failed or returned an unexpected shape"""

    code = "ENGINE_ERROR"


__all__ = [
    "TextRecognitionError",
    "InvalidInputError",
    "DecodeError",
    "OrientationError",
    "CropError",
    "EngineError",
]
