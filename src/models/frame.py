"""
Frame models for live video frames and surface geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class FrameDimensions:
    """Width and height of a frame or render surface, in pixels."""
    width: int
    height: int

    @classmethod
    def of(cls, image: np.ndarray) -> "FrameDimensions":
        h, w = image.shape[:2]
        return cls(width=int(w), height=int(h))

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class FrameData:
    """
    A decoded video frame sampled from the live source.

    Attributes:
        frame: The raw frame data as a numpy array (BGR format).
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when the frame was captured.
        frame_index: Sequential frame number since the source was opened.
        source: Identifier for the camera/video source.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array, reading size from its shape."""
        dims = FrameDimensions.of(frame)
        return cls(
            frame=frame,
            width=dims.width,
            height=dims.height,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
        )

    @property
    def dimensions(self) -> FrameDimensions:
        return FrameDimensions(width=self.width, height=self.height)
