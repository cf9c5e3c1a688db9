"""
Drawable presentation surface.

A RenderSurface is a BGR numpy canvas that the overlay renderer resizes to
the current frame before every draw. Readers (snapshot export, the MJPEG
stream, the preview window) get copies, never the live buffer.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import cv2
import numpy as np

from models.frame import FrameDimensions


class RenderSurface:
    """
    2D drawable region sized to the current frame.

    Args:
        width: Initial width in pixels.
        height: Initial height in pixels.
    """

    def __init__(self, width: int = 640, height: int = 480):
        self._image = np.zeros((height, width, 3), dtype=np.uint8)
        self.rendered_frame_index: Optional[int] = None
        self.rendered_at: Optional[float] = None

    @property
    def image(self) -> np.ndarray:
        """The live canvas. Only the renderer should draw on it."""
        return self._image

    @property
    def dimensions(self) -> FrameDimensions:
        return FrameDimensions.of(self._image)

    @property
    def has_content(self) -> bool:
        return self.rendered_at is not None

    def resize(self, dims: FrameDimensions) -> bool:
        """
        Match the surface to dims, discarding its content if the size changed.

        Returns:
            True if the surface was reallocated.
        """
        if dims == self.dimensions:
            return False
        old = self.dimensions
        self._image = np.zeros((dims.height, dims.width, 3), dtype=np.uint8)
        logging.info(f"Render surface resized: {old} -> {dims}")
        return True

    def clear(self) -> None:
        self._image.fill(0)

    def draw_image(self, image: np.ndarray) -> None:
        """Paint image over the whole surface, scaling it if sizes differ.

        Grayscale and BGRA inputs are converted to BGR.
        """
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        if image.shape[:2] != self._image.shape[:2]:
            dims = self.dimensions
            image = cv2.resize(image, (dims.width, dims.height))
        np.copyto(self._image, image)

    def mark_rendered(self, frame_index: int) -> None:
        self.rendered_frame_index = frame_index
        self.rendered_at = time.time()

    def snapshot(self) -> Optional[np.ndarray]:
        """Copy of the last rendered image, or None before the first render."""
        if not self.has_content:
            return None
        return self._image.copy()

    def encode(self, ext: str = ".png") -> Optional[bytes]:
        """Encode the last rendered image (e.g. ".png", ".jpg")."""
        image = self.snapshot()
        if image is None:
            return None
        ok, buf = cv2.imencode(ext, image)
        if not ok:
            raise RuntimeError(f"Failed to encode surface as {ext}")
        return buf.tobytes()
