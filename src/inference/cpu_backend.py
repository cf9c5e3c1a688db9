"""
CPU inference backend.

Uses Ultralytics YOLO if installed (`pip install .[yolo]`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from models.detection import BoundingBox, Detection


@dataclass(frozen=True)
class CpuYoloConfig:
    model: str
    min_confidence: float = 0.1
    iou_threshold: float = 0.45
    classes: Optional[Sequence[int]] = None
    class_name_overrides: Optional[Dict[int, str]] = None


def _to_numpy(tensor) -> np.ndarray:
    return tensor.cpu().numpy() if hasattr(tensor, "cpu") else np.asarray(tensor)


class UltralyticsCpuBackend:
    """
    Synchronous YOLO backend.

    min_confidence is only a noise floor (the lowest threshold the controls
    allow); user-facing filtering happens in the detection loop so threshold
    changes take effect without reloading the model.
    """

    def __init__(self, cfg: CpuYoloConfig, model=None):
        self.cfg = cfg
        if model is None:
            try:
                from ultralytics import YOLO  # type: ignore
            except ImportError as e:  # pragma: no cover
                raise ImportError(
                    "Ultralytics is not installed. Install with `pip install ultralytics` "
                    "or `pip install .[yolo]`."
                ) from e
            model = YOLO(cfg.model)
        self._model = model

    def label_for(self, class_id: int, names: Dict[int, str]) -> str:
        return (
            (self.cfg.class_name_overrides or {}).get(class_id)
            or names.get(class_id)
            or str(class_id)
        )

    def detect(self, frame: np.ndarray) -> List[Detection]:
        results = self._model.predict(
            source=frame,
            conf=self.cfg.min_confidence,
            iou=self.cfg.iou_threshold,
            classes=list(self.cfg.classes) if self.cfg.classes is not None else None,
            verbose=False,
        )
        if not results:
            return []

        r0 = results[0]
        names = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        out: List[Detection] = []
        for (x1, y1, x2, y2), c, k in zip(_to_numpy(boxes.xyxy), _to_numpy(boxes.conf), _to_numpy(boxes.cls)):
            out.append(
                Detection(
                    label=self.label_for(int(k), names),
                    confidence=float(c),
                    bbox=BoundingBox.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                )
            )
        return out
