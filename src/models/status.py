"""
Loop state and runtime statistics models.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .detection import Detection
from .frame import FrameDimensions


class LoopState(str, Enum):
    """Detection loop lifecycle states."""
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class LoopStats:
    """
    Runtime counters for the detection loop.

    Attributes:
        frames_processed: Frames that were inferred, filtered and rendered.
        inference_failures: Detector calls that raised.
        render_failures: Frames whose filter or draw step raised.
        acquisition_misses: Iterations that found no frame in the source.
        stale_discards: Inference results discarded because the loop stopped.
        started_at: Unix timestamp of the most recent start().
        last_render_ts: Unix timestamp of the most recent render.
    """
    frames_processed: int = 0
    inference_failures: int = 0
    render_failures: int = 0
    acquisition_misses: int = 0
    stale_discards: int = 0
    started_at: Optional[float] = None
    last_render_ts: Optional[float] = None
    last_stats_log_time: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frames_processed": self.frames_processed,
            "inference_failures": self.inference_failures,
            "render_failures": self.render_failures,
            "acquisition_misses": self.acquisition_misses,
            "stale_discards": self.stale_discards,
            "started_at": self.started_at,
            "last_render_ts": self.last_render_ts,
        }


@dataclass(frozen=True)
class FrameResult:
    """
    Outcome of one completed loop iteration.

    Attributes:
        frame_index: Index of the frame the detections were computed from.
        dimensions: Size of that frame (and of the surface it was drawn on).
        detections: Raw detector output for the frame.
        filtered: Detections at or above the threshold in effect at filter time.
        threshold: The threshold used for filtering, in [0, 1].
        timestamp: Unix timestamp when the result was produced.
    """
    frame_index: int
    dimensions: FrameDimensions
    detections: List[Detection]
    filtered: List[Detection]
    threshold: float
    timestamp: float
