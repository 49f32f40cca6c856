"""
Tests for orientation normalization
"""

import pytest
import numpy as np
import cv2

from textstrip import orientation
from textstrip.base import OrientationTag, PixelBuffer
from textstrip.errors import OrientationError
from textstrip.orientation import normalize, compose_transform, upright_size


def _expected(pixels, tag):
    """Reference upright rendering per EXIF semantics"""
    return {
        OrientationTag.UP: pixels,
        OrientationTag.UP_MIRRORED: pixels[:, ::-1],
        OrientationTag.DOWN: pixels[::-1, ::-1],
        OrientationTag.DOWN_MIRRORED: pixels[::-1, :],
        OrientationTag.RIGHT: np.rot90(pixels, k=-1),
        OrientationTag.LEFT: np.rot90(pixels, k=1),
        OrientationTag.LEFT_MIRRORED: np.swapaxes(pixels, 0, 1),
        OrientationTag.RIGHT_MIRRORED: np.swapaxes(pixels, 0, 1)[::-1, ::-1],
    }[tag]


@pytest.fixture
def rgb_pixels():
    """5x3 RGB 이미지 (모든 픽셀 값이 서로 다름)"""
    return (np.arange(3 * 5 * 3) * 5 % 256).astype(np.uint8).reshape(3, 5, 3)


@pytest.fixture
def rgba_pixels():
    pixels = (np.arange(4 * 6 * 4) % 256).astype(np.uint8).reshape(4, 6, 4)
    pixels[:, :, 3] = np.arange(4 * 6).reshape(4, 6) * 10
    return pixels


class TestNormalize:
    @pytest.mark.parametrize("tag", list(OrientationTag))
    def test_result_is_up(self, rgb_pixels, tag):
        result = normalize(PixelBuffer.from_array(rgb_pixels, tag))
        assert result.orientation is OrientationTag.UP

    @pytest.mark.parametrize("tag", list(OrientationTag))
    def test_pixels_match_reference(self, rgb_pixels, tag):
        result = normalize(PixelBuffer.from_array(rgb_pixels, tag))
        np.testing.assert_array_equal(result.pixels, _expected(rgb_pixels, tag))

    @pytest.mark.parametrize("tag", list(OrientationTag))
    def test_alpha_preserved(self, rgba_pixels, tag):
        result = normalize(PixelBuffer.from_array(rgba_pixels, tag))
        assert result.pixel_format == "RGBA"
        np.testing.assert_array_equal(result.pixels, _expected(rgba_pixels, tag))

    @pytest.mark.parametrize("tag", list(OrientationTag))
    def test_grayscale(self, tag):
        pixels = np.arange(7 * 4, dtype=np.uint8).reshape(4, 7)
        result = normalize(PixelBuffer.from_array(pixels, tag))
        np.testing.assert_array_equal(result.pixels, _expected(pixels, tag))

    def test_up_is_pixel_identical_copy(self, rgb_pixels):
        source = PixelBuffer.from_array(rgb_pixels, OrientationTag.UP)
        result = normalize(source)
        assert result is not source
        assert result.pixels is not source.pixels
        np.testing.assert_array_equal(result.pixels, source.pixels)

    @pytest.mark.parametrize("tag", [OrientationTag.LEFT, OrientationTag.RIGHT,
                                     OrientationTag.LEFT_MIRRORED, OrientationTag.RIGHT_MIRRORED])
    def test_quarter_turn_swaps_dimensions(self, rgb_pixels, tag):
        source = PixelBuffer.from_array(rgb_pixels, tag)
        result = normalize(source)
        assert (result.width, result.height) == (source.height, source.width)

    @pytest.mark.parametrize("tag", [OrientationTag.DOWN, OrientationTag.DOWN_MIRRORED,
                                     OrientationTag.UP_MIRRORED])
    def test_half_turn_keeps_dimensions(self, rgb_pixels, tag):
        source = PixelBuffer.from_array(rgb_pixels, tag)
        result = normalize(source)
        assert (result.width, result.height) == (source.width, source.height)

    def test_source_not_mutated(self, rgb_pixels):
        before = rgb_pixels.copy()
        source = PixelBuffer.from_array(rgb_pixels, OrientationTag.RIGHT_MIRRORED)
        normalize(source)
        np.testing.assert_array_equal(source.pixels, before)
        assert source.orientation is OrientationTag.RIGHT_MIRRORED

    def test_render_failure_raises(self, rgb_pixels, monkeypatch):
        def broken(*args, **kwargs):
            raise cv2.error("out of memory")

        monkeypatch.setattr(orientation.cv2, "warpAffine", broken)
        with pytest.raises(OrientationError):
            normalize(PixelBuffer.from_array(rgb_pixels, OrientationTag.DOWN))


class TestComposeTransform:
    def test_identity_for_up(self):
        np.testing.assert_array_equal(compose_transform(OrientationTag.UP, 10, 20), np.eye(3))

    def test_corners_stay_in_positive_quadrant(self):
        for tag in OrientationTag:
            matrix = compose_transform(tag, 10, 20)
            corners = np.array([[0, 10, 0, 10], [0, 0, 20, 20], [1, 1, 1, 1]])
            mapped = matrix @ corners
            width, height = upright_size(tag, 10, 20)
            assert mapped[0].min() == 0 and mapped[0].max() == width
            assert mapped[1].min() == 0 and mapped[1].max() == height

    def test_right_maps_top_left_to_top_right(self):
        """시계 방향 90도: 원본 좌상단 -> 결과 우상단"""
        matrix = compose_transform(OrientationTag.RIGHT, 10, 20)
        x, y, _ = matrix @ np.array([0, 0, 1])
        assert (x, y) == (20, 0)
