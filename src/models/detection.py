"""
Detection models for object detection results.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in frame-pixel coordinates.

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width in pixels.
        height: Box height in pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from corner coordinates (x1, y1, x2, y2)."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class Detection:
    """
    A single labeled, scored, boxed observation from one inference call.

    Attributes:
        label: Class name reported by the detector.
        confidence: Confidence score in [0, 1].
        bbox: Bounding box in frame-pixel coordinates.
    """
    label: str
    confidence: float
    bbox: BoundingBox

    @property
    def confidence_percent(self) -> int:
        """Confidence as an integer percentage, rounding halves up."""
        return int(self.confidence * 100 + 0.5)

    @classmethod
    def from_xywh(
        cls,
        label: str,
        confidence: float,
        x: float,
        y: float,
        w: float,
        h: float,
    ) -> "Detection":
        return cls(label=label, confidence=confidence, bbox=BoundingBox(x=x, y=y, width=w, height=h))
