"""
Tests for focalcal.config (TOML).
"""

import pytest

from focalcal.config import (
    FocalLengthConfig,
    create_default_focal_length_config,
    load_focal_length_config,
    save_focal_length_config,
)
from focalcal.errors import InvalidValueError
from focalcal.types import CalibrationParameters, TargetGeometry


class TestFocalLengthConfig:
    def test_save_and_load_roundtrip(self, temp_dir):
        """Config should survive save/load cycle."""
        original = FocalLengthConfig(
            scan=CalibrationParameters(
                step_count=64,
                fy_scan_range=1200,
                keep_new_value_after_successful_scan=1,
                adjust_both_sides=1,
                white_wall_mode=1,
            ),
            target=TargetGeometry(width_mm=180.0, height_mm=110.5, baseline_mm=-95.0),
        )

        config_path = temp_dir / "nested" / "focal_length.toml"
        save_focal_length_config(original, config_path)

        assert config_path.exists()

        loaded = load_focal_length_config(config_path)
        assert loaded == original

    def test_missing_sections_use_defaults(self, temp_dir):
        config_path = temp_dir / "empty.toml"
        config_path.write_text("")

        loaded = load_focal_length_config(config_path)
        assert loaded == create_default_focal_length_config()

    def test_partial_sections(self, temp_dir):
        config_path = temp_dir / "partial.toml"
        config_path.write_text(
            "[scan]\n"
            "step_count = 32\n"
            "\n"
            "[target]\n"
            "baseline_mm = 95.0\n"
        )

        loaded = load_focal_length_config(config_path)
        assert loaded.scan.step_count == 32
        assert loaded.scan.fy_scan_range == 40
        assert loaded.target.width_mm == 175.0
        assert loaded.target.baseline_mm == 95.0

    def test_invalid_scan_value(self, temp_dir):
        config_path = temp_dir / "bad.toml"
        config_path.write_text("[scan]\nwhite_wall_mode = 2\n")

        with pytest.raises(InvalidValueError) as exc_info:
            load_focal_length_config(config_path)
        assert exc_info.value.field == "white_wall_mode"

    def test_create_default_config(self):
        config = create_default_focal_length_config()
        assert config.scan == CalibrationParameters()
        assert config.target.width_mm == 175.0
        assert config.target.height_mm == 100.0
