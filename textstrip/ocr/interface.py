"""
Recognition Engine Interface

Every recognition engine implements this interface. The pipeline only
depends on RecognitionEngine.recognize, so tests can swap in a scripted
engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from ..base import PixelBuffer


@dataclass(frozen=True)
class RawObservation:
    """
    One recognized text region

    Only the top candidate string of the region is kept.
    """
    text: str
    """Recognized text"""

    confidence: float
    """Confidence (0.0 ~ 1.0)"""

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0.0 and 1.0, got {self.confidence}")


class RecognitionEngine(ABC):
    """
    Recognition engine abstract interface

    recognize() delivers exactly one outcome per call: a (possibly empty)
    sequence of observations, or an EngineError.
    """

    @abstractmethod
    def name(self) -> str:
        """Engine name"""
        pass

    @abstractmethod
    def recognize(self, buffer: PixelBuffer) -> Sequence[RawObservation]:
        """
        Run recognition on an upright, cropped buffer

        Args:
            buffer: Cropped text strip

        Returns:
            Observations in engine order

        Raises:
            EngineError: If recognition fails
        """
        pass

    def is_available(self) -> bool:
        """
        Whether the engine can run here (binaries, models, credentials)

        Returns:
            bool: True if usable
        """
        return True
