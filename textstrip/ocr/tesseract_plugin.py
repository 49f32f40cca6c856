"""
Tesseract OCR Plugin

RecognitionEngine backed by pytesseract. Word boxes are grouped into lines;
each line becomes one RawObservation.
"""

import logging
from typing import Dict, List, Optional, Tuple

import cv2
import pytesseract

from ..base import PixelBuffer
from ..config import Settings, load_settings
from ..errors import EngineError
from .interface import RawObservation, RecognitionEngine

logger = logging.getLogger(__name__)


def _to_rgb(buffer: PixelBuffer):
    image = buffer.pixels
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    return image


def lines_from_data(data: Dict[str, list]) -> List[RawObservation]:
    """
    Group image_to_data word rows into line observations

    Args:
        data: pytesseract.image_to_data(..., output_type=Output.DICT)

    Returns:
        One observation per text line in reading order; confidence is the
        mean word confidence scaled to 0.0 ~ 1.0
    """
    lines: Dict[Tuple[int, int, int, int], List[Tuple[str, float]]] = {}

    for i in range(len(data['text'])):
        text = str(data['text'][i]).strip()
        conf = float(data['conf'][i])

        # Skip empty text and non-word rows (conf -1)
        if not text or conf < 0:
            continue

        key = (
            int(data['page_num'][i]),
            int(data['block_num'][i]),
            int(data['par_num'][i]),
            int(data['line_num'][i]),
        )
        lines.setdefault(key, []).append((text, min(conf, 100.0) / 100.0))

    observations = []
    for words in lines.values():
        text = " ".join(word for word, _ in words)
        confidence = sum(conf for _, conf in words) / len(words)
        observations.append(RawObservation(text=text, confidence=confidence))
    return observations


class TesseractEngine(RecognitionEngine):
    """Tesseract OCR plugin (free, local)"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        if self.settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_cmd

    def name(self) -> str:
        return "Tesseract OCR"

    def recognize(self, buffer: PixelBuffer) -> List[RawObservation]:
        try:
            data = pytesseract.image_to_data(
                _to_rgb(buffer),
                lang=self.settings.tesseract_lang,
                config=f"--psm {self.settings.tesseract_psm}",
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as e:
            raise EngineError(f"Tesseract failed: {e}", cause=e) from e

        observations = lines_from_data(data)
        logger.debug("%s returned %d line(s)", self.name(), len(observations))
        return observations

    def is_available(self) -> bool:
        try:
            pytesseract.get_tesseract_version()
            return True
        except pytesseract.TesseractNotFoundError:
            return False
