"""
Live object detection: detect objects in a webcam stream, draw annotated
boxes and keep a running tally of everything seen.

Usage:
    python src/main.py --config config/config.yaml --autostart --display

Arguments:
    --config: Path to configuration file
    --display: Show the annotated stream in a local window
    --autostart: Start detecting immediately instead of waiting for the API
    --no-web: Do not serve the control API
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from models.config import Config
from ops.logging import setup_logging
from runtime import PreviewWindow, RuntimeContext, build_runtime, shutdown_runtime, start_runtime
from web.app import create_app

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `default.yaml` next to config_path (checked in)
    - `config.yaml` next to config_path (local overrides)
    - config_path itself, if it is neither of the above
    """
    config_dir = os.path.dirname(config_path)
    base_path = os.path.join(config_dir, "default.yaml")
    local_overrides_path = os.path.join(config_dir, "config.yaml")
    try:
        merged = _deep_merge(_read_yaml(base_path), _read_yaml(local_overrides_path))

        explicit = os.path.abspath(config_path)
        if explicit not in (os.path.abspath(base_path), os.path.abspath(local_overrides_path)):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'detection', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    device_id = camera['device_id']
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (URL or file path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"

    resolution = camera.get('resolution', [640, 480])
    if not isinstance(resolution, list) or len(resolution) != 2:
        return False, "camera.resolution must be a list of [width, height]"
    if not all(isinstance(x, int) and x > 0 for x in resolution):
        return False, "camera.resolution values must be positive integers"

    fps = camera.get('fps', 30)
    if not isinstance(fps, int) or fps <= 0:
        return False, "camera.fps must be a positive integer"

    if camera.get('backend', 'opencv') != 'opencv':
        return False, "camera.backend must be: opencv"
    if camera.get('rotate', 0) not in (0, 90, 180, 270):
        return False, "camera.rotate must be one of: 0, 90, 180, 270"

    # Detection
    detection = config.get('detection') or {}
    if detection.get('backend', 'yolo') != 'yolo':
        return False, "detection.backend must be: yolo"

    threshold = detection.get('confidence_threshold', 50)
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        return False, "detection.confidence_threshold must be a number"
    if not (10 <= threshold <= 100):
        return False, "detection.confidence_threshold must be between 10 and 100 (percent)"

    yolo_cfg = detection.get('yolo') or {}
    model = yolo_cfg.get('model', 'yolov8n.pt')
    if not isinstance(model, str) or not model:
        return False, "detection.yolo.model must be a non-empty string"
    if 'iou_threshold' in yolo_cfg:
        iou = yolo_cfg['iou_threshold']
        if not isinstance(iou, (int, float)) or not (0 < iou <= 1):
            return False, "detection.yolo.iou_threshold must be between 0 and 1"

    max_workers = detection.get('max_workers', 1)
    if not isinstance(max_workers, int) or max_workers <= 0:
        return False, "detection.max_workers must be a positive integer"

    # Display
    display = config.get('display') or {}
    paint_fps = display.get('paint_fps', 30)
    if isinstance(paint_fps, bool) or not isinstance(paint_fps, (int, float)) or paint_fps <= 0:
        return False, "display.paint_fps must be a positive number"
    for flag in ('show_window', 'autostart'):
        if flag in display and not isinstance(display[flag], bool):
            return False, f"display.{flag} must be a boolean"

    # Web
    web = config.get('web') or {}
    if 'enabled' in web and not isinstance(web['enabled'], bool):
        return False, "web.enabled must be a boolean"
    if 'host' in web and not isinstance(web['host'], str):
        return False, "web.host must be a string"
    port = web.get('port', 5000)
    if isinstance(port, bool) or not isinstance(port, int) or not (1 <= port <= 65535):
        return False, "web.port must be an integer between 1 and 65535"

    # Logging
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


async def run(ctx: RuntimeContext, display: bool = False, web_enabled: bool = True) -> None:
    """Run until interrupted, then release every resource."""
    start_runtime(ctx)
    preview = None
    if display:
        preview = PreviewWindow(ctx)
        ctx.loop.add_callback(preview)

    try:
        if web_enabled:
            web_cfg = ctx.settings.web
            server = uvicorn.Server(
                uvicorn.Config(
                    create_app(ctx),
                    host=web_cfg.host,
                    port=web_cfg.port,
                    log_level="info",
                )
            )
            logging.info(f"Web interface starting on port {web_cfg.port}")
            await server.serve()
        else:
            stop_event = asyncio.Event()
            event_loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    event_loop.add_signal_handler(sig, stop_event.set)
                except NotImplementedError:
                    pass
            await stop_event.wait()
    finally:
        await shutdown_runtime(ctx)
        if preview is not None:
            preview.close()


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Live Object Detection')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--display', action='store_true',
                        help='Show the annotated stream in a local window')
    parser.add_argument('--autostart', action='store_true',
                        help='Start detection immediately')
    parser.add_argument('--no-web', action='store_true',
                        help='Do not serve the control API')
    args = parser.parse_args()

    config = load_config(args.config)

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    settings = Config.from_dict(config)
    setup_logging(settings.log_path, settings.log_level)

    if args.autostart:
        config['display'] = dict(config.get('display') or {}, autostart=True)
    display = args.display or settings.display.show_window
    web_enabled = not args.no_web and settings.web.enabled

    logging.info("Starting Live Object Detection")
    try:
        ctx = build_runtime(config, config_path=args.config)
    except (ImportError, RuntimeError, ValueError) as e:
        logging.error(f"Failed to initialize: {e}")
        sys.exit(1)

    try:
        asyncio.run(run(ctx, display=display, web_enabled=web_enabled))
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    logging.info("Live Object Detection stopped")


if __name__ == "__main__":
    main()
