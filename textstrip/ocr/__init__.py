"""
Recognition engine plugins

- RecognitionEngine: engine-independent interface
- RawObservation: standard engine output
- filter_observations: threshold filter applied to engine output
"""

from .interface import RawObservation, RecognitionEngine
from .confidence import filter_observations

__all__ = [
    "RawObservation",
    "RecognitionEngine",
    "filter_observations",
]
