"""
Owned state of one detection loop.

Everything the loop mutates lives on a DetectionSession: lifecycle state,
the confidence threshold, cumulative counts, statistics and the last
completed result. The loop is the only writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from analytics.counts import Aggregator, AggregateCounts
from models.status import FrameResult, LoopState, LoopStats
from .stages.filter import clamp_threshold, threshold_to_percent


@dataclass
class DetectionSession:
    """
    State for one DetectionLoop.

    Attributes:
        threshold: Confidence threshold in [0, 1], read at filter time.
        state: Running or stopped.
        epoch: Incremented on every start/stop; an iteration whose epoch no
            longer matches belongs to a stopped run and must not touch state.
        aggregator: Cumulative per-label counts.
        stats: Runtime counters.
        last_result: Most recent completed iteration.
    """
    threshold: float = 0.5
    state: LoopState = LoopState.STOPPED
    epoch: int = 0
    aggregator: Aggregator = field(default_factory=Aggregator)
    stats: LoopStats = field(default_factory=LoopStats)
    last_result: Optional[FrameResult] = None

    def __post_init__(self):
        self.threshold = clamp_threshold(self.threshold)

    @property
    def running(self) -> bool:
        return self.state == LoopState.RUNNING

    @property
    def threshold_percent(self) -> int:
        return threshold_to_percent(self.threshold)

    @property
    def counts(self) -> AggregateCounts:
        return self.aggregator.counts

    def is_current(self, epoch: int) -> bool:
        return self.running and epoch == self.epoch
