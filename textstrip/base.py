"""
Base types

PixelBuffer, OrientationTag and CropRegion shared by every pipeline stage.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import math

import numpy as np


class OrientationTag(Enum):
    """
    Orientation of a stored raster, valued by its EXIF code

    Each tag is a clockwise quarter-turn count plus an optional horizontal
    mirror. The mirror is applied before the rotation.
    """
    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @property
    def quarter_turns(self) -> int:
        """Clockwise quarter turns needed to display the raster upright"""
        return _QUARTER_TURNS[self]

    @property
    def mirrored(self) -> bool:
        return self in (
            OrientationTag.UP_MIRRORED,
            OrientationTag.DOWN_MIRRORED,
            OrientationTag.LEFT_MIRRORED,
            OrientationTag.RIGHT_MIRRORED,
        )

    @property
    def swaps_axes(self) -> bool:
        """True for tags whose upright form exchanges width and height"""
        return self.quarter_turns % 2 == 1

    @staticmethod
    def from_exif(value: Optional[int]) -> 'OrientationTag':
        """
        Map an EXIF orientation value to a tag

        Missing or unknown values fall back to UP.
        """
        try:
            return OrientationTag(int(value))
        except (TypeError, ValueError):
            return OrientationTag.UP


_QUARTER_TURNS = {
    OrientationTag.UP: 0,
    OrientationTag.UP_MIRRORED: 0,
    OrientationTag.DOWN: 2,
    OrientationTag.DOWN_MIRRORED: 2,
    OrientationTag.RIGHT: 1,
    OrientationTag.RIGHT_MIRRORED: 1,
    OrientationTag.LEFT: 3,
    OrientationTag.LEFT_MIRRORED: 3,
}


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded raster with its dimensions and orientation tag"""
    width: int
    height: int
    orientation: OrientationTag
    pixels: np.ndarray
    pixel_format: str = "RGB"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"PixelBuffer dimensions must be positive, got {self.width}x{self.height}")
        if self.pixels.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Raster shape {self.pixels.shape[:2]} does not match {self.height}x{self.width}"
            )

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else self.pixels.shape[2]

    @property
    def is_upright(self) -> bool:
        return self.orientation is OrientationTag.UP

    def copy(self) -> 'PixelBuffer':
        """Independent copy with its own raster"""
        return PixelBuffer(
            width=self.width,
            height=self.height,
            orientation=self.orientation,
            pixels=self.pixels.copy(),
            pixel_format=self.pixel_format,
        )

    @staticmethod
    def from_array(pixels: np.ndarray,
                   orientation: OrientationTag = OrientationTag.UP,
                   pixel_format: Optional[str] = None) -> 'PixelBuffer':
        """Wrap a numpy raster (H x W or H x W x C)"""
        if pixel_format is None:
            pixel_format = _default_format(pixels)
        return PixelBuffer(
            width=pixels.shape[1],
            height=pixels.shape[0],
            orientation=orientation,
            pixels=pixels,
            pixel_format=pixel_format,
        )


def _default_format(pixels: np.ndarray) -> str:
    if pixels.ndim == 2:
        return "L"
    return {3: "RGB", 4: "RGBA"}.get(pixels.shape[2], "RGB")


@dataclass(frozen=True)
class CropRegion:
    """Fractional rectangle in upright image space"""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def integral(self) -> 'CropRegion':
        """Smallest enclosing rectangle with integer coordinates"""
        x1 = math.floor(self.x)
        y1 = math.floor(self.y)
        x2 = math.ceil(self.right)
        y2 = math.ceil(self.bottom)
        return CropRegion(x1, y1, x2 - x1, y2 - y1)

    def clamped(self, image_width: int, image_height: int) -> 'CropRegion':
        """Intersection with the image bounds (may have zero area)"""
        x1 = min(max(self.x, 0), image_width)
        y1 = min(max(self.y, 0), image_height)
        x2 = min(max(self.right, 0), image_width)
        y2 = min(max(self.bottom, 0), image_height)
        return CropRegion(x1, y1, max(x2 - x1, 0), max(y2 - y1, 0))

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_cv2_rect(self) -> Tuple[int, int, int, int]:
        """Convert to OpenCV rect format (x, y, w, h)"""
        return (int(self.x), int(self.y), int(self.width), int(self.height))

    def to_cv2_points(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Convert to OpenCV point pair format"""
        x, y, w, h = self.to_cv2_rect()
        return ((x, y), (x + w, y + h))
