"""
Overlay renderer: frame pixels plus a box and a caption per detection.

Rendering is a pure function of the frame, the detection batch and the
surface geometry. The surface is resized to the frame first, the frame is
drawn next, and all boxes and captions go on top.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import cv2
import numpy as np

from models.detection import BoundingBox, Detection
from models.frame import FrameData
from .surface import RenderSurface

# BGR
BOX_COLOR = (0, 0, 255)
BOX_THICKNESS = 3
FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.5
FONT_THICKNESS = 1

# Captions sit LABEL_LIFT px above the box unless the box top is within
# LABEL_MIN_Y px of the surface top, where they are pinned at LABEL_MIN_Y.
LABEL_LIFT = 5
LABEL_MIN_Y = 10


def format_label(detection: Detection) -> str:
    """Caption text, e.g. "person (92%)"."""
    return f"{detection.label} ({detection.confidence_percent}%)"


def label_origin(bbox: BoundingBox) -> Tuple[int, int]:
    """Baseline origin of the caption for bbox."""
    y = bbox.y - LABEL_LIFT if bbox.y > LABEL_MIN_Y else LABEL_MIN_Y
    return (int(round(bbox.x)), int(round(y)))


@dataclass(frozen=True)
class OverlayItem:
    """
    One detection's drawing instructions.

    Attributes:
        top_left: Box corner (x, y) in surface pixels.
        bottom_right: Opposite box corner.
        text: Caption text.
        text_origin: Caption baseline origin.
    """
    top_left: Tuple[int, int]
    bottom_right: Tuple[int, int]
    text: str
    text_origin: Tuple[int, int]


def layout(batch: Iterable[Detection]) -> List[OverlayItem]:
    items = []
    for det in batch:
        box = det.bbox
        items.append(
            OverlayItem(
                top_left=(int(round(box.x)), int(round(box.y))),
                bottom_right=(int(round(box.x2)), int(round(box.y2))),
                text=format_label(det),
                text_origin=label_origin(box),
            )
        )
    return items


class OverlayRenderer:
    """Draws filtered detections over the source frame onto a surface."""

    def __init__(
        self,
        color: Tuple[int, int, int] = BOX_COLOR,
        thickness: int = BOX_THICKNESS,
        font_scale: float = FONT_SCALE,
    ):
        self.color = color
        self.thickness = thickness
        self.font_scale = font_scale

    def render(self, frame: FrameData, batch: Iterable[Detection], surface: RenderSurface) -> np.ndarray:
        """
        Composite frame and overlays onto surface.

        Returns:
            The surface image (live buffer).
        """
        surface.resize(frame.dimensions)
        surface.clear()
        surface.draw_image(frame.frame)

        canvas = surface.image
        for item in layout(batch):
            cv2.rectangle(canvas, item.top_left, item.bottom_right, self.color, self.thickness)
            cv2.putText(
                canvas,
                item.text,
                item.text_origin,
                FONT,
                self.font_scale,
                self.color,
                FONT_THICKNESS,
                cv2.LINE_AA,
            )

        surface.mark_rendered(frame.frame_index)
        return canvas
