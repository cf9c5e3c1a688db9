from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.config import Config
from pipeline.engine import DetectionLoop
from rendering.surface import RenderSurface


@dataclass
class RuntimeContext:
    """Holds the wired collaborators for one run; avoids global singletons."""

    config: Dict[str, Any]
    source: Any
    detector: Any
    surface: RenderSurface
    loop: DetectionLoop
    config_path: Optional[str] = None
    start_time: float = field(default_factory=time.time)

    @property
    def settings(self) -> Config:
        """Typed view of config."""
        return Config.from_dict(self.config)

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time
