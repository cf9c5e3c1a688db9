"""
Cumulative per-label object counts.

Each filtered detection adds one to its label's count, so two chairs in a
single frame add two. Counts only grow while the loop runs; they are
cleared wholesale by reset(), never decremented. Labels keep first-seen
order.
"""

from __future__ import annotations

from typing import Dict, Iterable

from models.detection import Detection

AggregateCounts = Dict[str, int]


class Aggregator:
    """Folds per-frame detection batches into running label totals."""

    def __init__(self):
        self._counts: AggregateCounts = {}

    @property
    def counts(self) -> AggregateCounts:
        """A copy of the current totals, in first-seen order."""
        return dict(self._counts)

    def update(self, batch: Iterable[Detection]) -> AggregateCounts:
        """Add one per detection in batch and return the new totals."""
        for detection in batch:
            self._counts[detection.label] = self._counts.get(detection.label, 0) + 1
        return self.counts

    def reset(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)
