"""
Image cropping utilities

Cuts the fixed text strip out of an upright image.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from .base import CropRegion, PixelBuffer
from .config import CropRatios, DEFAULT_CROP_RATIOS
from .errors import CropError

logger = logging.getLogger(__name__)


def compute_crop_region(image_width: int,
                        image_height: int,
                        ratios: CropRatios = DEFAULT_CROP_RATIOS) -> CropRegion:
    """
    Fractional crop rectangle for an upright image

    Args:
        image_width: Upright image width (W)
        image_height: Upright image height (H)
        ratios: Rectangle as fractions of W and H

    Returns:
        CropRegion before integral rounding
    """
    return CropRegion(
        x=ratios.left * image_width,
        y=ratios.top * image_height,
        width=ratios.width * image_width,
        height=ratios.height * image_height,
    )


def crop_rect(image_width: int,
              image_height: int,
              ratios: CropRatios = DEFAULT_CROP_RATIOS) -> CropRegion:
    """
    Integer crop rectangle: integral expansion, then clamped to the image

    Raises:
        CropError: If the clamped rectangle has zero area
    """
    region = compute_crop_region(image_width, image_height, ratios)
    rect = region.integral().clamped(image_width, image_height)
    if rect.is_empty():
        raise CropError(
            f"Crop region {region} is empty for a {image_width}x{image_height} image"
        )
    return rect


def crop(buffer: PixelBuffer, ratios: CropRatios = DEFAULT_CROP_RATIOS) -> PixelBuffer:
    """
    Crop the text strip from an upright buffer

    Args:
        buffer: Upright source buffer (not modified)
        ratios: Rectangle as fractions of the buffer size

    Returns:
        New PixelBuffer owning a copy of the cropped pixels

    Raises:
        CropError: If the buffer is not upright or the region is empty
    """
    if not buffer.is_upright:
        raise CropError(f"Cannot crop a buffer tagged {buffer.orientation.name}; normalize it first")

    x, y, w, h = crop_rect(buffer.width, buffer.height, ratios).to_cv2_rect()
    logger.debug("Cropping %dx%d at (%d, %d) from %dx%d", w, h, x, y, buffer.width, buffer.height)

    cropped = buffer.pixels[y:y + h, x:x + w].copy()
    return PixelBuffer(
        width=w,
        height=h,
        orientation=buffer.orientation,
        pixels=cropped,
        pixel_format=buffer.pixel_format,
    )


def _to_bgr(buffer: PixelBuffer) -> np.ndarray:
    """OpenCV writes BGR(A); buffers are stored RGB(A)"""
    pixels = buffer.pixels
    if pixels.ndim == 2 or buffer.channels == 1:
        return pixels
    if buffer.channels == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)


def save_buffer(buffer: PixelBuffer, output_path: str) -> None:
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), _to_bgr(buffer)):
        raise OSError(f"Failed to write image: {output_path}")


def visualize_region(buffer: PixelBuffer, region: CropRegion, output_path: str) -> None:
    """
    Draw the crop rectangle on a copy of the image and save it

    Args:
        buffer: Upright source buffer
        region: Rectangle to outline
        output_path: Output file path
    """
    vis = _to_bgr(buffer).copy()
    if vis.ndim == 2 or vis.shape[2] == 1:
        vis = cv2.cvtColor(vis, cv2.COLOR_GRAY2BGR)
    elif vis.shape[2] == 4:
        vis = cv2.cvtColor(vis, cv2.COLOR_BGRA2BGR)

    top_left, bottom_right = region.to_cv2_points()
    # Draw rectangle (green)
    cv2.rectangle(vis, top_left, bottom_right, (0, 255, 0), 3)

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), vis):
        raise OSError(f"Failed to write image: {output_path}")
