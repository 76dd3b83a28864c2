"""
Scan-parameter validation.

Pure functions - raise on the first out-of-range value, no other side effects.
"""

from __future__ import annotations

from dataclasses import asdict

from ..errors import InvalidValueError
from ..types import CalibrationParameters


# Checked in this order; the first violation is the one reported.
PARAMETER_RANGES: dict[str, tuple[int, int]] = {
    "step_count": (8, 256),
    "fy_scan_range": (1, 60000),
    "keep_new_value_after_successful_scan": (0, 1),
    "interrupt_data_sampling": (0, 1),
    "adjust_both_sides": (0, 1),
    "fl_scan_location": (0, 1),
    "fy_scan_direction": (0, 1),
    "white_wall_mode": (0, 1),
}


def check_focal_length_params(
    step_count: int,
    fy_scan_range: int,
    keep_new_value_after_successful_scan: int,
    interrupt_data_sampling: int,
    adjust_both_sides: int,
    fl_scan_location: int,
    fy_scan_direction: int,
    white_wall_mode: int,
) -> None:
    """
    Validate focal-length scan parameters against their fixed ranges.

    Raises:
        InvalidValueError: Naming the first out-of-range parameter
    """
    values = {
        "step_count": step_count,
        "fy_scan_range": fy_scan_range,
        "keep_new_value_after_successful_scan": keep_new_value_after_successful_scan,
        "interrupt_data_sampling": interrupt_data_sampling,
        "adjust_both_sides": adjust_both_sides,
        "fl_scan_location": fl_scan_location,
        "fy_scan_direction": fy_scan_direction,
        "white_wall_mode": white_wall_mode,
    }

    for name, (minimum, maximum) in PARAMETER_RANGES.items():
        value = values[name]
        if value < minimum or value > maximum:
            raise InvalidValueError(name, value, minimum, maximum)


def validate_parameters(params: CalibrationParameters) -> None:
    """Validate a CalibrationParameters instance (see check_focal_length_params)."""
    check_focal_length_params(**asdict(params))
