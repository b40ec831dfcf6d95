"""
Unit Tests for Whisper Me Configuration
"""

import json

import pytest

from whisper_core.config import ConfigError, WhisperConfig


class TestWhisperConfig:
    """Test cases for WhisperConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = WhisperConfig.default()

        assert config.duration_seconds == 8
        assert config.sample_rate == 44100
        assert config.min_seed_length == 8
        assert config.output_filename == "whisper-me-message.wav"
        assert config.sample_count == 352800

    def test_from_dict_merges_defaults(self):
        """Test that missing keys fall back to defaults."""
        config = WhisperConfig.from_dict({"duration_seconds": 2})

        assert config.duration_seconds == 2
        assert config.sample_rate == 44100

    def test_unknown_keys_rejected(self):
        """Test that typos in config keys are reported."""
        with pytest.raises(ConfigError) as exc_info:
            WhisperConfig.from_dict({"sample_rat": 8000})

        assert exc_info.value.details["unknown"] == ["sample_rat"]

    @pytest.mark.parametrize("overrides", [
        {"duration_seconds": 0},
        {"sample_rate": -1},
        {"sample_rate": 44100.5},
        {"min_seed_length": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, overrides):
        """Test validation of each field."""
        with pytest.raises(ConfigError):
            WhisperConfig.from_dict(overrides)

    @pytest.mark.parametrize("overrides,code", [
        ({"duration_seconds": "8"}, 5001),
        ({"duration_seconds": None}, 5001),
        ({"sample_rate": "44100"}, 5002),
        ({"min_seed_length": "8"}, 5003),
        ({"min_seed_length": 8.5}, 5003),
        ({"output_filename": 42}, 5005),
        ({"output_filename": ""}, 5005),
        ({"log_level": 10}, 5004),
    ])
    def test_wrong_types_raise_config_error(self, overrides, code):
        """Test mistyped JSON values are reported as ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            WhisperConfig.from_dict(overrides)

        assert exc_info.value.code == code

    def test_mistyped_file_value(self, temp_directory):
        """Test a config file with a string duration is rejected cleanly."""
        path = temp_directory / "typed.json"
        path.write_text('{"duration_seconds": "8"}')

        with pytest.raises(ConfigError) as exc_info:
            WhisperConfig.from_file(path)

        assert exc_info.value.code == 5001

    def test_float_duration_accepted(self):
        """Test fractional durations and their sample count."""
        config = WhisperConfig.from_dict({"duration_seconds": 0.5, "sample_rate": 8000})

        assert config.sample_count == 4000

    def test_save_and_load(self, temp_directory):
        """Test JSON persistence round trip."""
        path = temp_directory / "whisper.json"
        config = WhisperConfig.from_dict({"sample_rate": 8000, "log_level": "debug"})

        config.save(path)
        loaded = WhisperConfig.from_file(path)

        assert loaded == config
        assert json.loads(path.read_text())["sample_rate"] == 8000

    def test_invalid_json(self, temp_directory):
        """Test that malformed JSON raises ConfigError."""
        path = temp_directory / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError) as exc_info:
            WhisperConfig.from_file(path)

        assert exc_info.value.code == 5020

    def test_non_object_json(self, temp_directory):
        """Test that a JSON list is rejected."""
        path = temp_directory / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            WhisperConfig.from_file(path)

    def test_missing_file(self, temp_directory):
        """Test that a missing file raises ConfigError."""
        with pytest.raises(ConfigError):
            WhisperConfig.from_file(temp_directory / "absent.json")
