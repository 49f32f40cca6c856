"""
Confidence filtering

Engine observations -> accepted strings
"""

from typing import Iterable, List

from .interface import RawObservation


def filter_observations(observations: Iterable[RawObservation],
                        threshold: float = 0.0) -> List[str]:
    """
    Keep the text of every observation at or above the threshold

    Engine order is preserved and duplicates are kept. An empty input is a
    valid (empty) result.

    Args:
        observations: Observations from the recognition engine
        threshold: Minimum confidence (0.0 keeps everything)

    Returns:
        Accepted strings
    """
    return [o.text for o in observations if o.confidence >= threshold]
