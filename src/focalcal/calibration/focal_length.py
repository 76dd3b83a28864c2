"""
Focal-length correction from left/right target measurements.

Pure functions - no threading, no state. All arithmetic is float32 so the
results match the values computed on the device side.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..frames import FrameQueue
from ..types import (
    CalibrationParameters,
    CorrectionResult,
    FocalLengthCalibration,
    TargetGeometry,
    TargetRectangle,
)
from .parameters import validate_parameters
from .target import ProgressCallback, TargetDetector, get_target_rect_info
from .target_detection import extract_target_dimensions

logger = logging.getLogger(__name__)

MIN_SIDE_LENGTH = np.float32(0.1)  # pixels; shorter sides contribute 0
CORRECTION_FACTOR = np.float32(0.5)  # share of the alignment error removed from the ratio


# ============================================================================
# Correction Factor
# ============================================================================


def get_focal_length_correction_factor(
    left_rect: TargetRectangle | Sequence[float],
    right_rect: TargetRectangle | Sequence[float],
    fx: Sequence[float],
    fy: Sequence[float],
    target_w: float,
    target_h: float,
    baseline: float,
) -> CorrectionResult:
    """
    Compute the focal-length correction for a stereo pair.

    Zero-length (undetected) sides are zero-filled and still counted in the
    per-side averages.

    Args:
        left_rect: Averaged left target rectangle [top, bottom, left, right]
        right_rect: Averaged right target rectangle
        fx: (fx_left, fx_right) in pixels
        fy: (fy_left, fy_right) in pixels
        target_w: Physical target width (same unit as baseline)
        target_h: Physical target height
        baseline: Stereo baseline; only its magnitude is used

    Returns:
        CorrectionResult with ratio_to_apply, ratio (%) and angle (degrees)
    """
    left = _as_sides(left_rect)
    right = _as_sides(right_rect)
    fx_left, fx_right = np.float32(fx[0]), np.float32(fx[1])
    fy_left, fy_right = np.float32(fy[0]), np.float32(fy[1])
    target_w = np.float32(target_w)
    target_h = np.float32(target_h)
    abs_baseline = np.float32(abs(baseline))

    # Relative aspect-ratio distortion between imagers (tilt proxy)
    ar_left = _aspect_ratio(left)
    ar_right = _aspect_ratio(right)

    align = np.float32(0.0)
    if ar_left > 0:
        align = ar_right / ar_left - np.float32(1.0)

    # Tilt angle from the distance implied by each imager
    gt_left = _average_ground_truth(left, fx_left, fy_left, target_w, target_h)
    gt_right = _average_ground_truth(right, fx_right, fy_right, target_w, target_h)

    angle_left = np.degrees(np.arctan(align * gt_left / abs_baseline))
    angle_right = np.degrees(np.arctan(align * gt_right / abs_baseline))
    angle = (angle_left + angle_right) / np.float32(2)

    # Per-side scale ratio, focal-length normalized
    c_x = fx_left / fx_right
    c_y = fy_left / fy_right
    scale = (c_x, c_x, c_y, c_y)

    r = np.zeros(4, dtype=np.float32)
    for i in range(4):
        if left[i] > MIN_SIDE_LENGTH:
            r[i] = scale[i] * right[i] / left[i]

    ra = _sum4(r) / np.float32(4)
    ra = (ra - np.float32(1.0)) * np.float32(100)

    align_pct = align * np.float32(100)
    ratio = ra - CORRECTION_FACTOR * align_pct
    ratio_to_apply = ratio / np.float32(100) + np.float32(1.0)

    logger.debug(
        "ar=(%.6f, %.6f) align=%.6f ave_gt=(%.3f, %.3f) angle=%.6f ratio=%.6f",
        ar_left, ar_right, align, gt_left, gt_right, angle, ratio,
    )

    return CorrectionResult(
        ratio_to_apply=float(ratio_to_apply),
        ratio=float(ratio),
        angle=float(angle),
    )


def _as_sides(rect: TargetRectangle | Sequence[float]) -> np.ndarray:
    if isinstance(rect, TargetRectangle):
        return rect.sides.astype(np.float32, copy=False)
    return TargetRectangle.from_sides(rect).sides


def _aspect_ratio(sides: np.ndarray) -> np.float32:
    vertical = sides[2] + sides[3]
    if vertical > MIN_SIDE_LENGTH:
        return (sides[0] + sides[1]) / vertical
    return np.float32(0.0)


def _average_ground_truth(
    sides: np.ndarray,
    fx: np.float32,
    fy: np.float32,
    target_w: np.float32,
    target_h: np.float32,
) -> np.float32:
    """
    Mean per-side focal estimate (pinhole inverted on the known target size).
    Always divides by 4, undetected sides included.
    """
    pairs = ((fx, target_w), (fx, target_w), (fy, target_h), (fy, target_h))

    gt = np.zeros(4, dtype=np.float32)
    for i, (f, dim) in enumerate(pairs):
        if sides[i] > 0:
            gt[i] = f * dim / sides[i]

    return _sum4(gt) / np.float32(4)


def _sum4(values: np.ndarray) -> np.float32:
    # Left-to-right float32 accumulation
    total = np.float32(0.0)
    for v in values:
        total += v
    return total


# ============================================================================
# Calibration Run
# ============================================================================


def run_focal_length_calibration(
    left_frames: FrameQueue,
    right_frames: FrameQueue,
    geometry: TargetGeometry,
    params: CalibrationParameters | None = None,
    progress: int = 0,
    progress_callback: ProgressCallback | None = None,
    detector: TargetDetector = extract_target_dimensions,
) -> FocalLengthCalibration:
    """
    Validate parameters, measure both imagers and compute the correction.

    Args:
        left_frames: Queued frames from the left imager
        right_frames: Queued frames from the right imager
        geometry: Physical target size and baseline
        params: Scan parameters (firmware defaults if None)
        progress: Starting progress value, continued across both imagers
        progress_callback: Per-frame progress sink
        detector: Target-detection primitive

    Returns:
        FocalLengthCalibration with both measurements and the correction

    Raises:
        InvalidValueError: If a scan parameter is out of range
        EmptyBatchError: If either queue is empty
        TargetExtractionError: If the target can't be measured
    """
    validate_parameters(params if params is not None else CalibrationParameters())

    left = get_target_rect_info(
        left_frames, progress, progress_callback, detector=detector
    )
    right = get_target_rect_info(
        right_frames, left.progress, progress_callback, detector=detector
    )

    correction = get_focal_length_correction_factor(
        left.rectangle,
        right.rectangle,
        fx=(left.focal_lengths.fx, right.focal_lengths.fx),
        fy=(left.focal_lengths.fy, right.focal_lengths.fy),
        target_w=geometry.width_mm,
        target_h=geometry.height_mm,
        baseline=geometry.baseline_mm,
    )

    logger.info(
        "Focal length correction: ratio_to_apply=%.6f ratio=%.4f%% angle=%.4f deg",
        correction.ratio_to_apply, correction.ratio, correction.angle,
    )

    return FocalLengthCalibration(left=left, right=right, correction=correction)
