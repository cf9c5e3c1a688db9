"""
Measure stage: fold one frame's detections into the session.

advance() is the loop's step function. It takes the session and the raw
detections for a frame, filters them against the threshold current at call
time and builds the frame's result. The optional draw hook runs before
anything is committed, so a frame that fails to draw adds nothing to the
cumulative counts or the processed-frame total.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from models.detection import Detection
from models.frame import FrameData
from models.status import FrameResult
from .filter import filter_detections

if TYPE_CHECKING:
    from pipeline.session import DetectionSession


def advance(
    session: "DetectionSession",
    frame: FrameData,
    detections: Iterable[Detection],
    draw: Optional[Callable[[FrameResult], None]] = None,
) -> FrameResult:
    raw = list(detections)
    threshold = session.threshold
    filtered = filter_detections(raw, threshold)

    result = FrameResult(
        frame_index=frame.frame_index,
        dimensions=frame.dimensions,
        detections=raw,
        filtered=filtered,
        threshold=threshold,
        timestamp=time.time(),
    )
    if draw is not None:
        draw(result)

    session.aggregator.update(filtered)
    session.last_result = result
    session.stats.frames_processed += 1
    return result
