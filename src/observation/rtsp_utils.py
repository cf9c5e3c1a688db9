"""
RTSP helpers: credential injection from a secrets file and URL redaction
for log output.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Union
from urllib.parse import urlparse, urlunparse

import yaml


def is_rtsp_url(device_id: Union[int, str]) -> bool:
    return isinstance(device_id, str) and device_id.startswith(("rtsp://", "rtsps://"))


def sanitize_url(device_id: Union[int, str]) -> str:
    """Return device_id as a string with any password replaced by ***."""
    if not is_rtsp_url(device_id):
        return str(device_id)
    parsed = urlparse(device_id)
    if not parsed.password:
        return device_id
    netloc = f"{parsed.username}:***@{parsed.hostname}"
    if parsed.port:
        netloc += f":{parsed.port}"
    return urlunparse(parsed._replace(netloc=netloc))


def inject_rtsp_credentials(camera_cfg: Dict[str, Any]) -> None:
    """
    Inject RTSP credentials from camera_cfg["secrets_file"] into device_id.

    The secrets file is YAML with username, password and an optional
    rtsp_url used when device_id is not already an RTSP URL. camera_cfg is
    modified in place; a missing or unreadable secrets file is logged and
    leaves the config untouched.
    """
    secrets_file = camera_cfg.get("secrets_file")
    if not secrets_file:
        return

    if not os.path.exists(secrets_file):
        logging.warning(f"Secrets file not found: {secrets_file}")
        return

    try:
        with open(secrets_file, "r") as f:
            secrets = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to read secrets file {secrets_file}: {e}")
        return

    device_id = camera_cfg.get("device_id", "")
    if is_rtsp_url(device_id):
        base_url = device_id
    elif secrets.get("rtsp_url"):
        base_url = secrets["rtsp_url"]
        logging.info("Using RTSP URL from secrets file")
    else:
        return

    username = secrets.get("username")
    password = secrets.get("password")
    if username and password and "@" not in base_url:
        parsed = urlparse(base_url)
        netloc = f"{username}:{password}@{parsed.hostname}"
        if parsed.port:
            netloc += f":{parsed.port}"
        base_url = urlunparse(parsed._replace(netloc=netloc))
        logging.info("RTSP credentials injected into device URL")

    camera_cfg["device_id"] = base_url
