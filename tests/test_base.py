"""
Unit tests for base types
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from textstrip.base import OrientationTag, PixelBuffer, CropRegion


class TestOrientationTag:
    def test_exif_values(self):
        assert OrientationTag.UP.value == 1
        assert OrientationTag.RIGHT.value == 6
        assert OrientationTag.LEFT.value == 8

    def test_from_exif_known(self):
        for value in range(1, 9):
            assert OrientationTag.from_exif(value).value == value

    def test_from_exif_unknown_falls_back_to_up(self):
        """알 수 없는 태그는 UP으로 처리"""
        assert OrientationTag.from_exif(None) is OrientationTag.UP
        assert OrientationTag.from_exif(0) is OrientationTag.UP
        assert OrientationTag.from_exif(9) is OrientationTag.UP
        assert OrientationTag.from_exif("garbage") is OrientationTag.UP

    def test_quarter_turns(self):
        assert OrientationTag.UP.quarter_turns == 0
        assert OrientationTag.RIGHT.quarter_turns == 1
        assert OrientationTag.DOWN.quarter_turns == 2
        assert OrientationTag.LEFT.quarter_turns == 3

    def test_mirrored(self):
        mirrored = {t for t in OrientationTag if t.mirrored}
        assert mirrored == {
            OrientationTag.UP_MIRRORED,
            OrientationTag.DOWN_MIRRORED,
            OrientationTag.LEFT_MIRRORED,
            OrientationTag.RIGHT_MIRRORED,
        }

    def test_swaps_axes(self):
        assert OrientationTag.LEFT.swaps_axes == True
        assert OrientationTag.RIGHT_MIRRORED.swaps_axes == True
        assert OrientationTag.DOWN.swaps_axes == False
        assert OrientationTag.UP_MIRRORED.swaps_axes == False


class TestPixelBuffer:
    def test_from_array_rgb(self):
        buf = PixelBuffer.from_array(np.zeros((20, 30, 3), dtype=np.uint8))
        assert buf.width == 30
        assert buf.height == 20
        assert buf.channels == 3
        assert buf.pixel_format == "RGB"
        assert buf.is_upright

    def test_from_array_gray(self):
        buf = PixelBuffer.from_array(np.zeros((5, 7), dtype=np.uint8), OrientationTag.LEFT)
        assert buf.channels == 1
        assert buf.pixel_format == "L"
        assert not buf.is_upright

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            PixelBuffer(10, 10, OrientationTag.UP, np.zeros((5, 10, 3), dtype=np.uint8))

    def test_zero_dimension(self):
        with pytest.raises(ValueError):
            PixelBuffer(0, 10, OrientationTag.UP, np.zeros((10, 0, 3), dtype=np.uint8))

    def test_copy_is_independent(self):
        buf = PixelBuffer.from_array(np.zeros((4, 4, 3), dtype=np.uint8))
        dup = buf.copy()
        dup.pixels[0, 0] = 255
        assert buf.pixels[0, 0, 0] == 0


class TestCropRegion:
    def test_integral_expands_outward(self):
        region = CropRegion(2.5, 3.2, 10.1, 4.0)
        rect = region.integral()
        assert rect.x == 2
        assert rect.y == 3
        assert rect.right == 13   # ceil(12.6)
        assert rect.bottom == 8   # ceil(7.2)

    def test_integral_keeps_integers(self):
        rect = CropRegion(25, 800, 950, 300).integral()
        assert rect.to_cv2_rect() == (25, 800, 950, 300)

    def test_clamped(self):
        rect = CropRegion(-5, 10, 120, 200).clamped(100, 100)
        assert rect.to_cv2_rect() == (0, 10, 100, 90)

    def test_clamped_outside_is_empty(self):
        rect = CropRegion(150, 150, 20, 20).clamped(100, 100)
        assert rect.is_empty()

    def test_to_cv2_points(self):
        assert CropRegion(10, 20, 100, 50).to_cv2_points() == ((10, 20), (110, 70))
