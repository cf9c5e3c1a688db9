"""
Latest-frame buffer over a blocking ObservationSource.

A background capture thread pulls frames from the source as fast as it
delivers them and keeps only the newest one. The detection loop samples
that slot once per paint tick through current_frame(), which never blocks.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from models.frame import FrameData
from .base import ObservationSource


class LiveFrameBuffer:
    """
    FrameSource backed by a capture thread.

    Example:
        buffer = LiveFrameBuffer(OpenCVSource(OpenCVSourceConfig(device_id=0)))
        buffer.start()
        frame_data = buffer.current_frame()  # None until the first frame arrives
        buffer.stop()

    Args:
        source: The blocking source to pull from. Opened by the capture thread.
        max_frame_age: Frames older than this many seconds are treated as
            unavailable, so a stalled camera surfaces as an acquisition miss
            instead of an endlessly repeated frame. None disables the check.
        retry_delay: Seconds between attempts to (re)open the source.
        idle_delay: Seconds to wait after a read that returned no frame.
    """

    def __init__(
        self,
        source: ObservationSource,
        max_frame_age: Optional[float] = 2.0,
        retry_delay: float = 1.0,
        idle_delay: float = 0.01,
    ):
        self.source = source
        self.max_frame_age = max_frame_age
        self.retry_delay = retry_delay
        self.idle_delay = idle_delay
        self._latest: Optional[FrameData] = None
        self._frame_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.frames_captured = 0

    @property
    def is_available(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        if self.is_available:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._capture_loop,
            name=f"capture-{self.source.source_id}",
            daemon=True,
        )
        self._thread.start()
        logging.info(f"Capture thread started: source={self.source.source_id}")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logging.warning(f"Capture thread did not exit within {timeout}s")
            self._thread = None
        self.source.close()
        with self._frame_lock:
            self._latest = None
        logging.info(f"Capture thread stopped: source={self.source.source_id}")

    def current_frame(self) -> Optional[FrameData]:
        with self._frame_lock:
            latest = self._latest
        if latest is None:
            return None
        if self.max_frame_age is not None and time.time() - latest.timestamp > self.max_frame_age:
            return None
        return latest

    def publish(self, frame_data: FrameData) -> None:
        """Replace the newest frame."""
        with self._frame_lock:
            self._latest = frame_data
        self.frames_captured += 1

    def _capture_loop(self) -> None:
        while not self._stop_event.is_set():
            if not self.source.is_open:
                try:
                    self.source.open()
                except Exception as e:
                    logging.warning(f"Failed to open source {self.source.source_id}: {e}")
                    self._stop_event.wait(self.retry_delay)
                    continue

            try:
                frame_data = self.source.read()
            except Exception as e:
                logging.warning(f"Frame read error on {self.source.source_id}: {e}")
                frame_data = None

            if frame_data is None:
                self._stop_event.wait(self.idle_delay)
                continue

            self.publish(frame_data)

    def __enter__(self) -> "LiveFrameBuffer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
