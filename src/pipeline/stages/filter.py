"""
Confidence filtering stage.

The threshold is a fraction in [0, 1]; the controls expose it as a whole
percentage (10-100). A detection passes when its score is at or above the
threshold.
"""

from __future__ import annotations

import math
from typing import Iterable, List

from models.detection import Detection

MIN_THRESHOLD_PERCENT = 10
MAX_THRESHOLD_PERCENT = 100


def clamp_threshold(value: float) -> float:
    """Clamp value into [0, 1]."""
    value = float(value)
    if math.isnan(value):
        raise ValueError("Confidence threshold must be a number, got NaN")
    return min(max(value, 0.0), 1.0)


def percent_to_threshold(percent: float) -> float:
    return clamp_threshold(float(percent) / 100.0)


def threshold_to_percent(threshold: float) -> int:
    return int(round(threshold * 100))


def filter_detections(detections: Iterable[Detection], threshold: float) -> List[Detection]:
    """Keep detections scoring at or above threshold, in detector order."""
    return [d for d in detections if d.confidence >= threshold]
