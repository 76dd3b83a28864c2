"""
Calibration module for focalcal.

All functions are pure - they take dataclasses and frame queues and return
dataclasses. No threading, no state management. Caller handles concurrency.
"""

from .parameters import (
    PARAMETER_RANGES,
    check_focal_length_params,
    validate_parameters,
)

from .target_detection import (
    TargetType,
    extract_target_dimensions,
    generate_target_image,
)

from .target import (
    get_target_rect_info,
)

from .focal_length import (
    get_focal_length_correction_factor,
    run_focal_length_calibration,
)

__all__ = [
    # Parameters
    "PARAMETER_RANGES",
    "check_focal_length_params",
    "validate_parameters",
    # Target detection
    "TargetType",
    "extract_target_dimensions",
    "generate_target_image",
    # Extraction
    "get_target_rect_info",
    # Correction
    "get_focal_length_correction_factor",
    "run_focal_length_calibration",
]
