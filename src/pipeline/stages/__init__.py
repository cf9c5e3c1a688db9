"""
Pipeline stages for the detection loop.

- filter: confidence threshold handling
- measure: the per-frame step that filters and aggregates
"""

from .filter import (
    MIN_THRESHOLD_PERCENT,
    MAX_THRESHOLD_PERCENT,
    clamp_threshold,
    filter_detections,
    percent_to_threshold,
    threshold_to_percent,
)
from .measure import advance

__all__ = [
    "MIN_THRESHOLD_PERCENT",
    "MAX_THRESHOLD_PERCENT",
    "clamp_threshold",
    "filter_detections",
    "percent_to_threshold",
    "threshold_to_percent",
    "advance",
]
