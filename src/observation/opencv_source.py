"""
OpenCV-based observation source.

Supports:
- USB webcams (device_id as int, e.g., 0)
- RTSP/IP cameras (device_id as str URL)
- Video files (device_id as file path)
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import cv2
import numpy as np

from models.frame import FrameData
from .base import ObservationSource, ObservationConfig
from .rtsp_utils import is_rtsp_url, sanitize_url


@dataclass
class OpenCVSourceConfig(ObservationConfig):
    """
    Configuration for OpenCV capture.

    Attributes:
        device_id: Camera index (int), RTSP URL (str), or file path (str).
        rtsp_transport: Transport protocol for RTSP ("tcp" or "udp").
        buffer_size: Capture buffer size; 1 keeps live feeds current.
        max_retries: Attempts before open() gives up.
        max_read_failures: Consecutive failed reads that trigger a reconnect.
        swap_rb: Swap R/B channels.
        rotate: Rotation in degrees (0, 90, 180, 270).
        flip_horizontal: Mirror the frame left-right.
        flip_vertical: Mirror the frame top-bottom.
    """
    device_id: Union[int, str] = 0
    rtsp_transport: str = "tcp"
    buffer_size: int = 1
    max_retries: int = 3
    max_read_failures: int = 3
    swap_rb: bool = False
    rotate: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @classmethod
    def from_camera_config(cls, camera_cfg: Dict[str, Any], source_id: str = "camera") -> "OpenCVSourceConfig":
        """Adapter: Create from the `camera` section of the YAML config."""
        resolution = camera_cfg.get("resolution")
        return cls(
            source_id=source_id,
            resolution=tuple(resolution) if resolution else None,
            fps=camera_cfg.get("fps"),
            device_id=camera_cfg.get("device_id", 0),
            rtsp_transport=camera_cfg.get("rtsp_transport", "tcp"),
            buffer_size=camera_cfg.get("buffer_size", 1),
            max_retries=camera_cfg.get("max_retries", 3),
            max_read_failures=camera_cfg.get("max_read_failures", 3),
            swap_rb=camera_cfg.get("swap_rb", False),
            rotate=camera_cfg.get("rotate", 0) or 0,
            flip_horizontal=camera_cfg.get("flip_horizontal", False),
            flip_vertical=camera_cfg.get("flip_vertical", False),
        )


class OpenCVSource(ObservationSource):
    """
    Wraps cv2.VideoCapture to provide frames as FrameData objects.

    Camera and stream read failures trigger a reconnect; end of a video file
    is reported as None without reconnecting.
    """

    def __init__(self, config: OpenCVSourceConfig):
        super().__init__(config)
        self._opencv_config = config
        self._cap: Optional[cv2.VideoCapture] = None
        self._consecutive_failures = 0

    @property
    def device_id(self) -> Union[int, str]:
        return self._opencv_config.device_id

    @property
    def is_file(self) -> bool:
        return (
            isinstance(self.device_id, str)
            and not is_rtsp_url(self.device_id)
            and os.path.exists(self.device_id)
        )

    def open(self) -> None:
        if self._is_open:
            return

        self._connect()
        self._is_open = True
        self._frame_index = 0
        logging.info(
            f"OpenCVSource opened: source_id={self.source_id}, "
            f"device={sanitize_url(self.device_id)}, resolution={self._opencv_config.resolution}"
        )

    def _connect(self) -> None:
        """Open the capture device, retrying with exponential backoff."""
        cfg = self._opencv_config
        if is_rtsp_url(self.device_id):
            os.environ["OPENCV_FFMPEG_CAPTURE_OPTIONS"] = f"rtsp_transport;{cfg.rtsp_transport}"

        for attempt in range(cfg.max_retries):
            if attempt > 0:
                wait_time = min(2 ** attempt, 10)
                logging.info(f"Retrying capture open (attempt {attempt + 1}/{cfg.max_retries}) after {wait_time}s")
                time.sleep(wait_time)

            self._release()
            self._cap = cv2.VideoCapture(self.device_id)
            if self._cap.isOpened():
                break
            logging.warning(f"Failed to open device {sanitize_url(self.device_id)}")
        else:
            self._release()
            raise RuntimeError(
                f"Failed to open device {sanitize_url(self.device_id)} after {cfg.max_retries} attempts"
            )

        if isinstance(self.device_id, int) and cfg.resolution:
            w, h = cfg.resolution
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
            if cfg.fps:
                self._cap.set(cv2.CAP_PROP_FPS, cfg.fps)
            self._cap.set(cv2.CAP_PROP_BUFFERSIZE, cfg.buffer_size)
            logging.info(
                f"Camera actual settings - Resolution: "
                f"({self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)}x{self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)}), "
                f"FPS: {self._cap.get(cv2.CAP_PROP_FPS)}"
            )

        self._consecutive_failures = 0

    def read(self) -> Optional[FrameData]:
        if not self._is_open or self._cap is None:
            return None

        ret, frame = self._cap.read()
        if not ret or frame is None:
            self._consecutive_failures += 1
            if self.is_file:
                logging.info("End of video file reached")
                return None

            logging.warning(f"Failed to read frame (failures: {self._consecutive_failures})")
            if self._consecutive_failures >= self._opencv_config.max_read_failures:
                try:
                    self._connect()
                except RuntimeError as e:
                    logging.error(f"Reconnect failed: {e}")
            return None

        self._consecutive_failures = 0
        self._frame_index += 1
        return FrameData.from_numpy(
            self._apply_transforms(frame),
            timestamp=time.time(),
            frame_index=self._frame_index,
            source=self.source_id,
        )

    def _apply_transforms(self, frame: np.ndarray) -> np.ndarray:
        """Apply configured rotation, flip and channel swap."""
        cfg = self._opencv_config

        rotations = {
            90: cv2.ROTATE_90_CLOCKWISE,
            180: cv2.ROTATE_180,
            270: cv2.ROTATE_90_COUNTERCLOCKWISE,
        }
        if cfg.rotate in rotations:
            frame = cv2.rotate(frame, rotations[cfg.rotate])

        if cfg.flip_horizontal and cfg.flip_vertical:
            frame = cv2.flip(frame, -1)
        elif cfg.flip_horizontal:
            frame = cv2.flip(frame, 1)
        elif cfg.flip_vertical:
            frame = cv2.flip(frame, 0)

        if cfg.swap_rb:
            frame = frame[..., ::-1].copy()

        return frame

    def _release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def close(self) -> None:
        self._release()
        if self._is_open:
            logging.info(f"OpenCVSource closed: source_id={self.source_id}")
        self._is_open = False
