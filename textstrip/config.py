"""textstrip default settings"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropRatios:
    """Crop rectangle as fractions of the upright image width/height"""

    left: float
    top: float
    width: float
    height: float


# Text strip in the lower-middle band of a card held in the capture guide
DEFAULT_CROP_RATIOS = CropRatios(left=0.025, top=0.40, width=0.95, height=0.15)

DEFAULT_IGNORE_THRESHOLD = 0.0
THRESHOLD_OPTION_KEY = "visionIgnoreThreshold"
FILE_SCHEME_PREFIX = "file://"

DEFAULT_TESSERACT_LANG = "eng"
DEFAULT_TESSERACT_PSM = 6


@dataclass(frozen=True)
class Settings:
    """Environment-driven settings (read from .env when present)"""

    tesseract_lang: str = DEFAULT_TESSERACT_LANG
    tesseract_cmd: Optional[str] = None
    tesseract_psm: int = DEFAULT_TESSERACT_PSM
    debug_dir: Optional[str] = None


def _psm_from_env() -> int:
    psm = os.getenv("TEXTSTRIP_TESSERACT_PSM")
    if not psm:
        return DEFAULT_TESSERACT_PSM
    try:
        return int(psm)
    except ValueError:
        logger.warning(
            "TEXTSTRIP_TESSERACT_PSM=%r is not an integer; using %d", psm, DEFAULT_TESSERACT_PSM
        )
        return DEFAULT_TESSERACT_PSM


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        tesseract_lang=os.getenv("TEXTSTRIP_TESSERACT_LANG") or DEFAULT_TESSERACT_LANG,
        tesseract_cmd=os.getenv("TEXTSTRIP_TESSERACT_CMD") or None,
        tesseract_psm=_psm_from_env(),
        debug_dir=os.getenv("TEXTSTRIP_DEBUG_DIR") or None,
    )


__all__ = [
    "CropRatios",
    "DEFAULT_CROP_RATIOS",
    "DEFAULT_IGNORE_THRESHOLD",
    "THRESHOLD_OPTION_KEY",
    "FILE_SCHEME_PREFIX",
    "DEFAULT_TESSERACT_LANG",
    "DEFAULT_TESSERACT_PSM",
    "Settings",
    "load_settings",
]
