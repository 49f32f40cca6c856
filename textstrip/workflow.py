"""
Text strip recognition workflow

Workflow steps (one request):
1. Load and decode the image
2. Normalize orientation
3. Crop the text strip
4. Run the recognition engine (worker thread)
5. Filter observations by confidence

Any failure ends the request immediately in FAILED with one error kind.
Nothing is retried and no partial result is returned.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .base import PixelBuffer
from .config import (
    CropRatios,
    DEFAULT_CROP_RATIOS,
    DEFAULT_IGNORE_THRESHOLD,
    THRESHOLD_OPTION_KEY,
    load_settings,
)
from .errors import EngineError, InvalidInputError, TextRecognitionError
from .image_cropper import crop, crop_rect, save_buffer, visualize_region
from .image_loader import load_image, resolve_image_path
from .ocr.confidence import filter_observations
from .ocr.interface import RawObservation, RecognitionEngine
from .orientation import normalize

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """State of a recognition request"""
    IDLE = "idle"
    LOADING = "loading"
    NORMALIZING = "normalizing"
    CROPPING = "cropping"
    RECOGNIZING = "recognizing"
    FILTERING = "filtering"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RecognitionOptions:
    """Per-request options"""
    ignore_threshold: float = DEFAULT_IGNORE_THRESHOLD

    @staticmethod
    def from_mapping(options: Optional[Mapping[str, Any]]) -> 'RecognitionOptions':
        """
        Build options from the caller's key/value mapping

        A missing or non-positive visionIgnoreThreshold means no filtering.

        Raises:
            InvalidInputError: If the threshold is not a number
        """
        if not options:
            return RecognitionOptions()

        value = options.get(THRESHOLD_OPTION_KEY)
        if value is None:
            return RecognitionOptions()

        try:
            threshold = float(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidInputError(f"{THRESHOLD_OPTION_KEY} must be a number, got {value!r}", cause=e) from e

        # NaN and non-positive values disable filtering
        if not threshold > 0:
            threshold = DEFAULT_IGNORE_THRESHOLD
        return RecognitionOptions(ignore_threshold=threshold)


@dataclass
class RequestResult:
    """Terminal outcome of a recognition request"""
    success: bool
    state: PipelineState
    texts: List[str] = field(default_factory=list)
    error: Optional[TextRecognitionError] = None
    failed_at: Optional[PipelineState] = None

    @property
    def code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def message(self) -> str:
        return self.error.message if self.error else ""

    @classmethod
    def completed(cls, texts: List[str]) -> "RequestResult":
        return cls(success=True, state=PipelineState.COMPLETED, texts=list(texts))

    @classmethod
    def failed(cls, at: PipelineState, error: TextRecognitionError) -> "RequestResult":
        return cls(success=False, state=PipelineState.FAILED, error=error, failed_at=at)

    def to_dict(self) -> Dict[str, Any]:
        """Response shape for a host bridge"""
        if self.success:
            return {"success": True, "texts": list(self.texts)}
        return {"success": False, "code": self.code, "message": self.message}


class RequestPipeline:
    """
    Runs one recognition request end to end

    The pipeline object holds configuration only; every request keeps its
    own state and buffers, so one instance can serve concurrent requests.
    """

    def __init__(self,
                 engine: Optional[RecognitionEngine] = None,
                 ratios: CropRatios = DEFAULT_CROP_RATIOS,
                 debug_dir: Optional[str] = None):
        settings = None
        if engine is None or debug_dir is None:
            settings = load_settings()

        if engine is None:
            from .ocr.tesseract_plugin import TesseractEngine
            engine = TesseractEngine(settings)

        self.engine = engine
        self.ratios = ratios
        self.debug_dir = debug_dir if debug_dir is not None else settings.debug_dir

    async def run_async(self,
                        image_path: str,
                        options: Optional[Mapping[str, Any]] = None) -> RequestResult:
        """
        Process one image

        Args:
            image_path: Image path (file:// prefix allowed)
            options: Caller options (visionIgnoreThreshold)

        Returns:
            RequestResult in COMPLETED or FAILED state
        """
        state = PipelineState.IDLE
        try:
            resolve_image_path(image_path)
            request_options = RecognitionOptions.from_mapping(options)

            state = self._enter(PipelineState.LOADING, image_path)
            source = load_image(image_path)

            state = self._enter(PipelineState.NORMALIZING, image_path)
            upright = normalize(source)
            del source

            state = self._enter(PipelineState.CROPPING, image_path)
            strip = crop(upright, self.ratios)
            if self.debug_dir:
                self._save_debug(image_path, upright, strip)
            del upright

            state = self._enter(PipelineState.RECOGNIZING, image_path)
            observations = await asyncio.to_thread(self._call_engine, strip)

            state = self._enter(PipelineState.FILTERING, image_path)
            texts = filter_observations(observations, request_options.ignore_threshold)
        except TextRecognitionError as e:
            logger.warning("Recognition failed at %s [%s]: %s", state.value, e.code, e.message)
            return RequestResult.failed(state, e)

        logger.info(
            "Recognized %d of %d line(s) from %s (threshold %.2f)",
            len(texts), len(observations), image_path, request_options.ignore_threshold,
        )
        return RequestResult.completed(texts)

    def run(self, image_path: str, options: Optional[Mapping[str, Any]] = None) -> RequestResult:
        """Synchronous wrapper around run_async"""
        return asyncio.run(self.run_async(image_path, options))

    @staticmethod
    def _enter(state: PipelineState, image_path: str) -> PipelineState:
        logger.debug("%s: %s", image_path, state.value)
        return state

    def _call_engine(self, buffer: PixelBuffer) -> List[RawObservation]:
        try:
            observations = self.engine.recognize(buffer)
        except EngineError:
            raise
        except Exception as e:
            raise EngineError(f"{self.engine.name()} failed: {e}", cause=e) from e

        # An empty list is a valid result; anything that is not a list of
        # observations is not
        if not isinstance(observations, (list, tuple)):
            raise EngineError("No text recognized.")
        if not all(isinstance(o, RawObservation) for o in observations):
            raise EngineError("No text recognized.")
        return list(observations)

    def _save_debug(self, image_path: str, upright: PixelBuffer, strip: PixelBuffer) -> None:
        stem = Path(resolve_image_path(image_path)).stem
        out_dir = Path(self.debug_dir)
        try:
            region = crop_rect(upright.width, upright.height, self.ratios)
            visualize_region(upright, region, str(out_dir / f"{stem}_region.png"))
            save_buffer(strip, str(out_dir / f"{stem}_strip.png"))
        except OSError as e:
            logger.warning("Failed to write debug images to %s: %s", out_dir, e)


async def recognize_async(image_path: str,
                          options: Optional[Mapping[str, Any]] = None,
                          engine: Optional[RecognitionEngine] = None) -> RequestResult:
    """Recognize the text strip of one image (async)"""
    return await RequestPipeline(engine=engine).run_async(image_path, options)


def recognize(image_path: str,
              options: Optional[Mapping[str, Any]] = None,
              engine: Optional[RecognitionEngine] = None) -> RequestResult:
    """
    Recognize the text strip of one image

    Example:
        result = recognize("file:///tmp/card.jpg", {"visionIgnoreThreshold": 0.5})
        if result.success:
            print(result.texts)
        else:
            print(result.code, result.message)
    """
    return asyncio.run(recognize_async(image_path, options, engine))
