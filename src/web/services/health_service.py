from __future__ import annotations

import platform
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from runtime.context import RuntimeContext

CAMERA_STALE_S = 2.0
DETECTION_STALLED_S = 10.0


def compute_warnings(
    last_frame_age_s: Optional[float],
    running: bool,
    last_render_age_s: Optional[float],
) -> List[str]:
    """
    Warning flags for the health endpoint.

    Thresholds:
    - camera_offline: no frame available at all
    - camera_stale: newest frame older than 2s
    - detection_stalled: running but nothing rendered for 10s
    """
    warnings = []
    if last_frame_age_s is None:
        warnings.append("camera_offline")
    elif last_frame_age_s > CAMERA_STALE_S:
        warnings.append("camera_stale")

    if running and (last_render_age_s is None or last_render_age_s > DETECTION_STALLED_S):
        warnings.append("detection_stalled")
    return warnings


@dataclass
class HealthService:
    ctx: RuntimeContext

    def get_health_summary(self) -> Dict[str, Any]:
        now = time.time()
        frame = self.ctx.source.current_frame()
        last_frame_age = now - frame.timestamp if frame is not None else None
        last_render_ts = self.ctx.loop.stats.last_render_ts
        last_render_age = now - last_render_ts if last_render_ts else None

        warnings = compute_warnings(last_frame_age, self.ctx.loop.running, last_render_age)
        return {
            "status": "degraded" if warnings else "ok",
            "warnings": warnings,
            "last_frame_age_s": last_frame_age,
            "uptime_seconds": self.ctx.uptime_seconds,
            "detail": {
                "platform": platform.platform(),
                "python": platform.python_version(),
                "config_path": self.ctx.config_path,
                "log_path": self.ctx.config.get("log_path"),
            },
        }
