"""
Observation interfaces for live video sources.

Two contracts live here:

- ObservationSource: a pull-based source (open/read/close) such as a USB
  camera, an RTSP stream or a video file. read() may block.
- FrameSource: what the detection loop samples once per paint tick. It
  never blocks and returns the newest frame, or None when nothing is
  available (acquisition failure or not yet warmed up).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Protocol, runtime_checkable

from models.frame import FrameData


@runtime_checkable
class FrameSource(Protocol):
    """Non-blocking handle to the live frame sequence."""

    @property
    def is_available(self) -> bool:
        """False once the source has been closed or was never opened."""
        ...

    def current_frame(self) -> Optional[FrameData]:
        """Return the most recent frame, or None if none is ready."""
        ...


@dataclass
class ObservationConfig:
    """
    Base configuration for observation sources.

    Attributes:
        source_id: Unique identifier for this source (e.g., "webcam").
        resolution: Target resolution as (width, height). None = use source default.
        fps: Target frames per second. None = use source default.
        metadata: Additional source-specific configuration.
    """
    source_id: str = "default"
    resolution: Optional[tuple[int, int]] = None
    fps: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ObservationSource(ABC):
    """
    Abstract base class for pull-based video sources.

    Lifecycle:
        1. Create instance with config
        2. Call open() to initialize the source
        3. Call read() repeatedly to get frames
        4. Call close() to release resources

    Can also be used as a context manager:
        with OpenCVSource(config) as source:
            for frame_data in source:
                process(frame_data)
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Number of frames read since open."""
        return self._frame_index

    @abstractmethod
    def open(self) -> None:
        """
        Open/initialize the source.

        Raises:
            RuntimeError: If the source cannot be opened.
        """

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        """
        Read the next frame.

        Returns:
            FrameData, or None if no frame is available (end of file, camera error).
        """

    @abstractmethod
    def close(self) -> None:
        """Release the source. Safe to call multiple times."""

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FrameData]:
        """Yield frames until the source is exhausted. The source must be open."""
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")

        while True:
            frame_data = self.read()
            if frame_data is None:
                break
            yield frame_data
