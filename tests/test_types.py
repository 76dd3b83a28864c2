"""
Tests for focalcal.types dataclasses.
"""

import numpy as np
import pytest

from focalcal.types import (
    CalibrationParameters,
    CorrectionResult,
    FocalLengths,
    TargetGeometry,
    TargetRectangle,
    apply_focal_length_correction,
)


class TestCalibrationParameters:
    def test_firmware_defaults(self):
        params = CalibrationParameters()
        assert params.step_count == 20
        assert params.fy_scan_range == 40
        assert params.keep_new_value_after_successful_scan == 0
        assert params.interrupt_data_sampling == 0
        assert params.adjust_both_sides == 0
        assert params.fl_scan_location == 0
        assert params.fy_scan_direction == 0
        assert params.white_wall_mode == 0

    def test_frozen(self):
        params = CalibrationParameters()
        with pytest.raises(AttributeError):
            params.step_count = 30


class TestTargetGeometry:
    def test_defaults(self):
        geometry = TargetGeometry()
        assert geometry.width_mm == 175.0
        assert geometry.height_mm == 100.0
        assert geometry.baseline_mm == -50.0


class TestTargetRectangle:
    def test_from_sides(self):
        rect = TargetRectangle.from_sides([200, 201, 160, 161])
        assert rect.sides.dtype == np.float32
        assert rect.sides.shape == (4,)
        assert rect.horizontal == (200.0, 201.0)
        assert rect.vertical == (160.0, 161.0)

    def test_from_array(self):
        rect = TargetRectangle.from_sides(np.array([[1.0, 2.0], [3.0, 4.0]]))
        np.testing.assert_array_equal(rect.sides, [1, 2, 3, 4])

    @pytest.mark.parametrize("values", [[], [1.0, 2.0, 3.0], [1.0] * 5])
    def test_wrong_length(self, values):
        with pytest.raises(ValueError):
            TargetRectangle.from_sides(values)

    def test_frozen(self):
        rect = TargetRectangle.from_sides([1, 1, 1, 1])
        with pytest.raises(AttributeError):
            rect.sides = np.zeros(4)


class TestApplyFocalLengthCorrection:
    def test_scales_both_axes(self):
        corrected = apply_focal_length_correction(FocalLengths(fx=640.0, fy=642.0), 1.01)
        assert corrected.fx == pytest.approx(646.4)
        assert corrected.fy == pytest.approx(648.42)

    def test_identity(self):
        original = FocalLengths(fx=640.0, fy=642.0)
        assert apply_focal_length_correction(original, 1.0) == original


class TestCorrectionResult:
    def test_creation(self):
        result = CorrectionResult(ratio_to_apply=1.002, ratio=0.2, angle=-0.1)
        assert result.ratio_to_apply == 1.002
        assert result.ratio == 0.2
        assert result.angle == -0.1
