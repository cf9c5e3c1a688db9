"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src (and this directory, for fakes.py) to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
sys.path.insert(0, os.path.dirname(__file__))

from fakes import ManualPaintScheduler, StaticFrameSource, make_frame  # noqa: E402


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  resolution: [640, 480]
  fps: 30

detection:
  backend: "yolo"
  confidence_threshold: 50
  yolo:
    model: "yolov8n.pt"

display:
  paint_fps: 30

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [640, 480],
            "fps": 30,
        },
        "detection": {
            "backend": "yolo",
            "confidence_threshold": 50,
            "yolo": {"model": "yolov8n.pt", "iou_threshold": 0.45},
        },
        "display": {
            "paint_fps": 30,
            "show_window": False,
            "autostart": False,
        },
        "web": {
            "enabled": True,
            "host": "127.0.0.1",
            "port": 5000,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def scheduler():
    return ManualPaintScheduler()


@pytest.fixture
def source():
    return StaticFrameSource(make_frame(640, 480, index=1))
