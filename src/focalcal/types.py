"""
Core data structures for focalcal.

All types are frozen dataclasses with slots for immutability.
Logic is in separate pure functions - these are data containers only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


# ============================================================================
# Scan Parameters
# ============================================================================


@dataclass(frozen=True, slots=True)
class CalibrationParameters:
    """
    Scan-control parameters for a focal-length calibration run.
    Corresponds to the TOML [scan] section. Defaults are the firmware defaults.
    """

    step_count: int = 20  # 8 - 256
    fy_scan_range: int = 40  # 1 - 60000
    keep_new_value_after_successful_scan: int = 0
    interrupt_data_sampling: int = 0
    adjust_both_sides: int = 0
    fl_scan_location: int = 0
    fy_scan_direction: int = 0
    white_wall_mode: int = 0


# ============================================================================
# Target Geometry
# ============================================================================


@dataclass(frozen=True, slots=True)
class TargetGeometry:
    """
    Physical size of the calibration target and the stereo baseline.
    Corresponds to the TOML [target] section.
    """

    width_mm: float = 175.0  # Distance between horizontal dot pairs
    height_mm: float = 100.0  # Distance between vertical dot pairs
    baseline_mm: float = -50.0  # Sign follows the extrinsics; only |baseline| is used


@dataclass(frozen=True, slots=True)
class TargetRectangle:
    """
    Measured side lengths of a detected target, in pixels.

    Index convention:
        [0] top, [1] bottom  - horizontal sides
        [2] left, [3] right  - vertical sides
    """

    sides: np.ndarray  # (4,) float32

    @classmethod
    def from_sides(cls, values: Sequence[float] | np.ndarray) -> TargetRectangle:
        """
        Build a rectangle from exactly four side lengths.

        Raises:
            ValueError: If values does not hold exactly 4 numbers
        """
        sides = np.asarray(values, dtype=np.float32).reshape(-1)
        if sides.shape != (4,):
            raise ValueError(
                f"Target rectangle needs exactly 4 side lengths, got {sides.size}"
            )
        return cls(sides=sides)

    @property
    def horizontal(self) -> tuple[float, float]:
        return float(self.sides[0]), float(self.sides[1])

    @property
    def vertical(self) -> tuple[float, float]:
        return float(self.sides[2]), float(self.sides[3])


# ============================================================================
# Extraction / Estimation Results
# ============================================================================


@dataclass(frozen=True, slots=True)
class FocalLengths:
    """Focal lengths of one imager, in pixels."""

    fx: float
    fy: float


@dataclass(frozen=True, slots=True)
class TargetRectInfo:
    """
    Averaged target measurement for one imager.

    progress is the caller's progress counter after this batch, so a
    second extraction can continue counting from it.
    """

    rectangle: TargetRectangle
    focal_lengths: FocalLengths
    frame_count: int  # Frames that contributed to the average
    progress: int


@dataclass(frozen=True, slots=True)
class CorrectionResult:
    """
    Output of the focal-length correction estimator.

    ratio_to_apply is the multiplicative focal-length correction.
    ratio (percent) and angle (degrees) are diagnostics.
    """

    ratio_to_apply: float
    ratio: float
    angle: float


@dataclass(frozen=True, slots=True)
class FocalLengthCalibration:
    """Everything produced by one left/right calibration run."""

    left: TargetRectInfo
    right: TargetRectInfo
    correction: CorrectionResult


# ============================================================================
# Pure functions for computed properties
# ============================================================================


def apply_focal_length_correction(
    focal_lengths: FocalLengths,
    ratio_to_apply: float,
) -> FocalLengths:
    """
    Scale both focal lengths by a correction factor.
    """
    return FocalLengths(
        fx=focal_lengths.fx * ratio_to_apply,
        fy=focal_lengths.fy * ratio_to_apply,
    )
