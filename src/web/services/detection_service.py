from __future__ import annotations

from typing import Any, Dict

from pipeline.engine import DetectionLoop


class DetectionService:
    """Read models and control actions over a DetectionLoop for the API."""

    def __init__(self, loop: DetectionLoop):
        self.loop = loop

    def status(self) -> Dict[str, Any]:
        last = self.loop.last_result
        return {
            "running": self.loop.running,
            "state": self.loop.state.value,
            "threshold_percent": self.loop.threshold_percent,
            **self.loop.stats.to_dict(),
            "frame_width": last.dimensions.width if last else None,
            "frame_height": last.dimensions.height if last else None,
            "last_frame_detections": len(last.filtered) if last else 0,
        }

    def counts(self) -> Dict[str, Any]:
        counts = self.loop.counts
        return {
            "counts": [{"label": label, "count": count} for label, count in counts.items()],
            "total": sum(counts.values()),
        }

    def start(self, reset_counts: bool = False) -> Dict[str, Any]:
        self.loop.start(reset_counts=reset_counts)
        return self.status()

    def stop(self) -> Dict[str, Any]:
        self.loop.stop()
        return self.status()

    def toggle(self) -> Dict[str, Any]:
        self.loop.toggle()
        return self.status()

    def set_threshold(self, percent: int) -> Dict[str, Any]:
        self.loop.set_threshold_percent(percent)
        return self.status()

    def reset_counts(self) -> Dict[str, Any]:
        self.loop.reset_counts()
        return self.counts()
