"""
Typed configuration models matching the YAML config structure.

load_config() returns a plain dict; Config.from_dict() is the typed view the
runtime builders read from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """
    Camera settings the loop needs.

    The capture backend reads the full `camera` section itself (transforms,
    RTSP secrets), see OpenCVSourceConfig.from_camera_config.
    """
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [640, 480])
    fps: int = 30

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=list(d.get("resolution", [640, 480])),
            fps=int(d.get("fps", 30)),
        )


@dataclass
class YoloConfig:
    """YOLO detector configuration."""
    model: str = "yolov8n.pt"
    iou_threshold: float = 0.45
    classes: Optional[List[int]] = None
    class_name_overrides: Optional[Dict[int, str]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "YoloConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            iou_threshold=float(d.get("iou_threshold", 0.45)),
            classes=d.get("classes"),
            class_name_overrides=d.get("class_name_overrides"),
        )


@dataclass
class DetectionConfig:
    """
    Detection configuration.

    confidence_threshold is expressed in percent (10-100), the range the
    user-facing controls expose.
    """
    backend: str = "yolo"
    confidence_threshold: float = 50
    max_workers: int = 1
    yolo: YoloConfig = field(default_factory=YoloConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            backend=d.get("backend", "yolo"),
            confidence_threshold=d.get("confidence_threshold", 50),
            max_workers=int(d.get("max_workers", 1)),
            yolo=YoloConfig.from_dict(d.get("yolo") or {}),
        )


@dataclass
class DisplayConfig:
    """Paint cadence and local preview window."""
    paint_fps: float = 30.0
    show_window: bool = False
    autostart: bool = False
    stats_log_interval: float = 60.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplayConfig":
        return cls(
            paint_fps=float(d.get("paint_fps", 30.0)),
            show_window=bool(d.get("show_window", False)),
            autostart=bool(d.get("autostart", False)),
            stats_log_interval=float(d.get("stats_log_interval", 60.0)),
        )


@dataclass
class WebConfig:
    """Web control surface configuration."""
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 5000
    stream_fps: int = 10

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=bool(d.get("enabled", True)),
            host=d.get("host", "0.0.0.0"),
            port=int(d.get("port", 5000)),
            stream_fps=d.get("stream_fps", 10),
        )


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/live_detection.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera") or {}),
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            display=DisplayConfig.from_dict(d.get("display") or {}),
            web=WebConfig.from_dict(d.get("web") or {}),
            log_path=d.get("log_path", "logs/live_detection.log"),
            log_level=d.get("log_level", "INFO"),
        )
