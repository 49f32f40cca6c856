"""
textstrip

Reads a short line of text from the fixed strip region of a photographed
card: decode -> orientation fix -> crop -> OCR -> confidence filter.
"""

from .base import CropRegion, OrientationTag, PixelBuffer
from .config import CropRatios, DEFAULT_CROP_RATIOS
from .errors import (
    CropError,
    DecodeError,
    EngineError,
    InvalidInputError,
    OrientationError,
    TextRecognitionError,
)
from .image_cropper import crop
from .ocr import RawObservation, RecognitionEngine, filter_observations
from .orientation import normalize
from .workflow import (
    PipelineState,
    RecognitionOptions,
    RequestPipeline,
    RequestResult,
    recognize,
    recognize_async,
)

__all__ = [
    "CropRegion",
    "OrientationTag",
    "PixelBuffer",
    "CropRatios",
    "DEFAULT_CROP_RATIOS",
    "TextRecognitionError",
    "InvalidInputError",
    "DecodeError",
    "OrientationError",
    "CropError",
    "EngineError",
    "crop",
    "normalize",
    "RawObservation",
    "RecognitionEngine",
    "filter_observations",
    "PipelineState",
    "RecognitionOptions",
    "RequestPipeline",
    "RequestResult",
    "recognize",
    "recognize_async",
]
