"""
Orientation normalization

Renders a tagged raster into the canonical upright frame (row 0 is the
visual top, column 0 the visual left).

Every tag decodes to (quarter_turns, mirrored). One transform is composed
from those two fields:
- mirror: translate by the source width, scale x by -1
- rotation: rotate by quarter_turns * 90 degrees clockwise, then translate
  the rotated content back into the positive quadrant

The composed matrix is applied in a single cv2.warpAffine pass.
Coordinates are raster coordinates (x right, y down).
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from .base import OrientationTag, PixelBuffer
from .errors import OrientationError

logger = logging.getLogger(__name__)

# (cos, sin) for 0, 90, 180, 270 degrees clockwise
_QUARTER_COS_SIN = [(1, 0), (0, 1), (-1, 0), (0, -1)]


def _translation(tx: float, ty: float) -> np.ndarray:
    return np.array([[1, 0, tx], [0, 1, ty], [0, 0, 1]], dtype=np.float64)


def mirror_transform(width: int) -> np.ndarray:
    """Horizontal flip of a canvas `width` units wide"""
    scale = np.array([[-1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=np.float64)
    return _translation(width, 0) @ scale


def rotation_transform(quarter_turns: int, width: int, height: int) -> np.ndarray:
    """
    Clockwise rotation of a width x height canvas, re-anchored at the origin

    Args:
        quarter_turns: Number of 90 degree clockwise turns (0..3)
        width: Source canvas width
        height: Source canvas height

    Returns:
        3x3 homogeneous matrix
    """
    cos, sin = _QUARTER_COS_SIN[quarter_turns % 4]
    rotate = np.array([[cos, -sin, 0], [sin, cos, 0], [0, 0, 1]], dtype=np.float64)

    corners = np.array([[0, width, 0, width], [0, 0, height, height], [1, 1, 1, 1]])
    rotated = rotate @ corners
    return _translation(-rotated[0].min(), -rotated[1].min()) @ rotate


def compose_transform(tag: OrientationTag, width: int, height: int) -> np.ndarray:
    """
    Full source -> upright transform for a tag (mirror first, then rotation)

    Returns:
        3x3 homogeneous matrix in continuous raster coordinates
    """
    transform = np.eye(3, dtype=np.float64)
    if tag.mirrored:
        transform = mirror_transform(width) @ transform
    return rotation_transform(tag.quarter_turns, width, height) @ transform


def upright_size(tag: OrientationTag, width: int, height: int) -> Tuple[int, int]:
    """Destination (width, height); quarter turns exchange the axes"""
    if tag.swaps_axes:
        return height, width
    return width, height


def _pixel_center_matrix(transform: np.ndarray) -> np.ndarray:
    # Pixel i covers [i, i+1); warpAffine addresses pixel centers
    return _translation(-0.5, -0.5) @ transform @ _translation(0.5, 0.5)


def normalize(buffer: PixelBuffer) -> PixelBuffer:
    """
    Render a buffer in upright orientation

    The input buffer is never modified. An UP buffer comes back as a
    pixel-identical copy.

    Args:
        buffer: Decoded buffer with any orientation tag

    Returns:
        New PixelBuffer tagged UP

    Raises:
        OrientationError: If the upright raster cannot be rendered
    """
    tag = buffer.orientation
    if tag is OrientationTag.UP:
        return buffer.copy()

    dst_width, dst_height = upright_size(tag, buffer.width, buffer.height)
    matrix = _pixel_center_matrix(compose_transform(tag, buffer.width, buffer.height))

    logger.debug(
        "Normalizing %s buffer %dx%d -> %dx%d",
        tag.name, buffer.width, buffer.height, dst_width, dst_height,
    )

    try:
        # Nearest neighbour keeps every channel (alpha included) exact
        upright = cv2.warpAffine(
            np.ascontiguousarray(buffer.pixels),
            matrix[:2],
            (dst_width, dst_height),
            flags=cv2.INTER_NEAREST,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0,
        )
    except cv2.error as e:
        raise OrientationError(f"Failed to render upright image: {e}", cause=e) from e

    if upright is None or upright.shape[:2] != (dst_height, dst_width):
        raise OrientationError("Failed to render upright image: unexpected raster shape")

    # warpAffine drops a trailing singleton channel axis
    if buffer.pixels.ndim == 3 and upright.ndim == 2:
        upright = upright[:, :, np.newaxis]

    return PixelBuffer(
        width=dst_width,
        height=dst_height,
        orientation=OrientationTag.UP,
        pixels=upright,
        pixel_format=buffer.pixel_format,
    )
