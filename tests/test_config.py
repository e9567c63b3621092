"""
Smoke tests for configuration loading and validation.
"""

import os
import pytest

from main import load_config, validate_config
from models.config import (
    AccelerationMode,
    ClassifierConfig,
    Config,
    DetectorConfig,
    EngineConfig,
)


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "engine", "model", "log_path", "log_level"])
    def test_missing_section(self, valid_config, section):
        """Each required section is enforced."""
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_negative_device_id(self, valid_config):
        """Negative integer device_id fails."""
        valid_config["camera"]["device_id"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_unknown_resolution_policy(self, valid_config):
        valid_config["camera"]["resolution_policy"] = "medium"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "resolution_policy" in error

    def test_bad_supported_resolution(self, valid_config):
        valid_config["camera"]["supported_resolutions"] = [[640]]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "supported_resolutions" in error

    def test_unknown_acceleration(self, valid_config):
        valid_config["engine"]["acceleration"] = "tpu"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "acceleration" in error

    def test_non_integer_threads(self, valid_config):
        valid_config["engine"]["num_threads"] = "four"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "num_threads" in error

    def test_unknown_task(self, valid_config):
        valid_config["model"]["task"] = "segmentation"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "model.task" in error

    def test_missing_model_path(self, valid_config):
        del valid_config["model"]["path"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "model.path" in error

    def test_min_confidence_out_of_range(self, valid_config):
        valid_config["model"]["min_confidence"] = 1.5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_confidence" in error

    def test_negative_top_k(self, valid_config):
        valid_config["model"]["task"] = "classification"
        valid_config["model"]["top_k"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "top_k" in error

    def test_labels_required(self, valid_config):
        del valid_config["model"]["labels"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "labels" in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for layered config loading."""

    def test_loads_default_yaml(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["model"]["path"] == "detect.tflite"
        assert config["engine"]["num_threads"] == 2

    def test_local_overrides_merge(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text(
            "engine:\n  num_threads: 8\nmodel:\n  min_confidence: 0.4\n"
        )

        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["engine"]["num_threads"] == 8
        assert config["engine"]["acceleration"] == "none"
        assert config["model"]["min_confidence"] == 0.4
        assert config["model"]["labels"] == ["person", "dog", "cat"]

    def test_explicit_path_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: DEBUG\n")
        explicit = temp_config_dir / "robot.yaml"
        explicit.write_text("log_level: WARNING\n")

        config = load_config(str(explicit))

        assert config["log_level"] == "WARNING"

    def test_defaults_pass_validation(self, temp_config_dir):
        config = load_config(os.path.join(str(temp_config_dir), "config.yaml"))

        is_valid, error = validate_config(config)

        assert is_valid, error


class TestTypedConfig:
    """Tests for Config.from_dict / to_dict."""

    def test_detector_config_from_dict(self, valid_config):
        config = Config.from_dict(valid_config)

        assert config.task == "detection"
        assert isinstance(config.model, DetectorConfig)
        assert config.model.model_path == "detect.tflite"
        assert config.model.min_confidence == 0.5
        assert config.model.draw_annotations is False
        assert config.model.quantized is True
        assert config.asset_dirs == ["models"]

    def test_engine_is_shared_with_model(self, valid_config):
        config = Config.from_dict(valid_config)

        assert config.engine.acceleration == AccelerationMode.GPU
        assert config.engine.num_threads == 4
        assert config.model.engine == config.engine

    def test_classifier_selected_by_task(self, valid_config):
        valid_config["model"]["task"] = "classification"
        valid_config["model"]["top_k"] = 3

        config = Config.from_dict(valid_config)

        assert config.task == "classification"
        assert isinstance(config.model, ClassifierConfig)
        assert config.model.top_k == 3

    def test_defaults(self):
        config = Config.from_dict({})

        assert config.task == "detection"
        assert config.model.min_confidence == 0.6
        assert config.model.draw_annotations is True
        assert config.engine.acceleration == AccelerationMode.NONE
        assert config.engine.use_xnnpack is True
        assert config.engine.allow_buffer_handle_output is False
        assert config.engine.cancellable is True
        assert ClassifierConfig().top_k == 10

    def test_round_trip(self, valid_config):
        config = Config.from_dict(valid_config)

        again = Config.from_dict(config.to_dict())

        assert again == config

    def test_engine_delegate_paths_merge_defaults(self):
        engine = EngineConfig.from_dict({"delegate_paths": {"gpu": "/opt/libgpu.so"}})

        assert engine.delegate_paths["gpu"] == "/opt/libgpu.so"
        assert engine.delegate_paths["nnapi"] == "libvx_delegate.so"

    def test_acceleration_parse(self):
        assert AccelerationMode.parse("GPU") == AccelerationMode.GPU
        assert AccelerationMode.parse(None) == AccelerationMode.NONE
        with pytest.raises(ValueError):
            AccelerationMode.parse("tpu")
