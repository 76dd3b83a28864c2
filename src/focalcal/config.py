"""
Configuration loading/saving.

Pure functions operating on dataclasses.
- TOML for scan parameters and target geometry
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import rtoml

from .calibration.parameters import validate_parameters
from .types import CalibrationParameters, TargetGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FocalLengthConfig:
    """
    Focal-length calibration settings.
    Loaded from a TOML file with [scan] and [target] sections.
    """

    scan: CalibrationParameters = field(default_factory=CalibrationParameters)
    target: TargetGeometry = field(default_factory=TargetGeometry)


# ============================================================================
# TOML Configuration
# ============================================================================


def load_focal_length_config(path: Path) -> FocalLengthConfig:
    """
    Load focal-length calibration settings from a TOML file.

    Missing keys fall back to the defaults.

    Args:
        path: Path to the TOML file

    Returns:
        FocalLengthConfig dataclass

    Raises:
        InvalidValueError: If a scan parameter is out of range
    """
    data = rtoml.load(Path(path))

    defaults = CalibrationParameters()
    scan_data = data.get("scan", {})
    scan = CalibrationParameters(
        step_count=int(scan_data.get("step_count", defaults.step_count)),
        fy_scan_range=int(scan_data.get("fy_scan_range", defaults.fy_scan_range)),
        keep_new_value_after_successful_scan=int(
            scan_data.get(
                "keep_new_value_after_successful_scan",
                defaults.keep_new_value_after_successful_scan,
            )
        ),
        interrupt_data_sampling=int(
            scan_data.get("interrupt_data_sampling", defaults.interrupt_data_sampling)
        ),
        adjust_both_sides=int(scan_data.get("adjust_both_sides", defaults.adjust_both_sides)),
        fl_scan_location=int(scan_data.get("fl_scan_location", defaults.fl_scan_location)),
        fy_scan_direction=int(scan_data.get("fy_scan_direction", defaults.fy_scan_direction)),
        white_wall_mode=int(scan_data.get("white_wall_mode", defaults.white_wall_mode)),
    )
    validate_parameters(scan)

    target_defaults = TargetGeometry()
    target_data = data.get("target", {})
    target = TargetGeometry(
        width_mm=float(target_data.get("width_mm", target_defaults.width_mm)),
        height_mm=float(target_data.get("height_mm", target_defaults.height_mm)),
        baseline_mm=float(target_data.get("baseline_mm", target_defaults.baseline_mm)),
    )

    logger.info("Loaded focal length config from %s", path)

    return FocalLengthConfig(scan=scan, target=target)


def save_focal_length_config(config: FocalLengthConfig, path: Path) -> None:
    """
    Save focal-length calibration settings to a TOML file.

    Args:
        config: FocalLengthConfig dataclass
        path: Path to save the TOML file
    """
    scan = config.scan
    data = {
        "scan": {
            "step_count": scan.step_count,
            "fy_scan_range": scan.fy_scan_range,
            "keep_new_value_after_successful_scan": scan.keep_new_value_after_successful_scan,
            "interrupt_data_sampling": scan.interrupt_data_sampling,
            "adjust_both_sides": scan.adjust_both_sides,
            "fl_scan_location": scan.fl_scan_location,
            "fy_scan_direction": scan.fy_scan_direction,
            "white_wall_mode": scan.white_wall_mode,
        },
        "target": {
            "width_mm": config.target.width_mm,
            "height_mm": config.target.height_mm,
            "baseline_mm": config.target.baseline_mm,
        },
    }

    path = Path(path)
    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        rtoml.dump(data, f)


def create_default_focal_length_config() -> FocalLengthConfig:
    """
    Create the default configuration: firmware scan defaults and the
    standard 175 x 100 mm target.
    """
    return FocalLengthConfig(
        scan=CalibrationParameters(),
        target=TargetGeometry(),
    )
