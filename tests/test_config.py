"""
Smoke tests for configuration loading and validation.
"""

import pytest

from main import load_config, validate_config
from models.config import Config


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "detection", "log_path", "log_level"])
    def test_missing_required_section(self, valid_config, section):
        """Each required section is reported by name."""
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_optional_sections_may_be_absent(self, valid_config):
        """display and web fall back to defaults."""
        del valid_config["display"]
        del valid_config["web"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_missing_device_id(self, valid_config):
        del valid_config["camera"]["device_id"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_negative_device_index(self, valid_config):
        valid_config["camera"]["device_id"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False

    def test_rtsp_device_id_is_valid(self, valid_config):
        valid_config["camera"]["device_id"] = "rtsp://192.168.1.20/stream"

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_invalid_resolution(self, valid_config):
        valid_config["camera"]["resolution"] = [640]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "resolution" in error

    def test_invalid_rotate(self, valid_config):
        valid_config["camera"]["rotate"] = 45

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "rotate" in error

    @pytest.mark.parametrize("threshold", [5, 101, "high", True])
    def test_threshold_out_of_range(self, valid_config, threshold):
        """The threshold is a percentage between 10 and 100."""
        valid_config["detection"]["confidence_threshold"] = threshold

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "confidence_threshold" in error

    @pytest.mark.parametrize("threshold", [10, 50, 72.5, 100])
    def test_threshold_in_range(self, valid_config, threshold):
        valid_config["detection"]["confidence_threshold"] = threshold

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_unknown_detection_backend(self, valid_config):
        valid_config["detection"]["backend"] = "hailo"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "backend" in error

    def test_invalid_iou(self, valid_config):
        valid_config["detection"]["yolo"]["iou_threshold"] = 1.5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False

    def test_invalid_paint_fps(self, valid_config):
        valid_config["display"]["paint_fps"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "paint_fps" in error

    def test_invalid_port(self, valid_config):
        valid_config["web"]["port"] = 70000

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "port" in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for load_config layering."""

    def test_loads_default_only(self, temp_config_dir):
        """Without overrides the defaults are returned."""
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["camera"]["device_id"] == 0
        assert config["detection"]["confidence_threshold"] == 50

    def test_local_overrides_merge(self, temp_config_dir):
        """config.yaml overrides individual keys and keeps the rest."""
        (temp_config_dir / "config.yaml").write_text("""
detection:
  confidence_threshold: 70
""")

        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["detection"]["confidence_threshold"] == 70
        assert config["detection"]["yolo"]["model"] == "yolov8n.pt"
        assert config["camera"]["fps"] == 30

    def test_explicit_file_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("""
camera:
  fps: 15
""")
        explicit = temp_config_dir / "office.yaml"
        explicit.write_text("""
camera:
  fps: 5
  device_id: "rtsp://cam.local/stream"
""")

        config = load_config(str(explicit))

        assert config["camera"]["fps"] == 5
        assert config["camera"]["device_id"] == "rtsp://cam.local/stream"
        assert config["camera"]["resolution"] == [640, 480]

    def test_invalid_yaml_exits(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("camera: [unclosed\n")

        with pytest.raises(SystemExit) as exc:
            load_config(str(temp_config_dir / "config.yaml"))

        assert exc.value.code == 1

    def test_loaded_config_validates(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "config.yaml"))

        is_valid, error = validate_config(config)

        assert is_valid is True, error


class TestTypedConfig:
    def test_from_dict_defaults(self):
        cfg = Config.from_dict({})
        assert cfg.camera.resolution == [640, 480]
        assert cfg.detection.confidence_threshold == 50
        assert cfg.display.paint_fps == 30.0
        assert cfg.web.port == 5000

    def test_from_dict_reads_sections(self, valid_config):
        valid_config["detection"]["max_workers"] = 2
        valid_config["web"]["stream_fps"] = 5
        cfg = Config.from_dict(valid_config)
        assert cfg.detection.backend == "yolo"
        assert cfg.detection.max_workers == 2
        assert cfg.detection.yolo.model == "yolov8n.pt"
        assert cfg.detection.yolo.iou_threshold == 0.45
        assert cfg.detection.yolo.classes is None
        assert cfg.display.autostart is False
        assert cfg.web.host == "127.0.0.1"
        assert cfg.web.stream_fps == 5
        assert cfg.log_path == "logs/test.log"

    def test_null_sections_use_defaults(self):
        cfg = Config.from_dict({"camera": None, "display": None})
        assert cfg.camera.backend == "opencv"
        assert cfg.display.stats_log_interval == 60.0
