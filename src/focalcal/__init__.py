# focalcal - Stereo focal-length correction from calibration-target geometry

__version__ = "0.1.0"

# Errors
from focalcal.errors import (
    CalibrationError,
    InvalidValueError,
    EmptyBatchError,
    TargetExtractionError,
)

# Core types
from focalcal.types import (
    CalibrationParameters,
    TargetGeometry,
    TargetRectangle,
    FocalLengths,
    TargetRectInfo,
    CorrectionResult,
    FocalLengthCalibration,
    apply_focal_length_correction,
)

# Frames
from focalcal.frames import (
    StreamIntrinsics,
    StreamProfile,
    Frame,
    FrameQueue,
)

# Devices
from focalcal.devices import (
    Context,
    DeviceInfo,
    DeviceFactory,
    StaticDeviceFactory,
)

# Calibration
from focalcal.calibration import (
    TargetType,
    check_focal_length_params,
    validate_parameters,
    extract_target_dimensions,
    generate_target_image,
    get_target_rect_info,
    get_focal_length_correction_factor,
    run_focal_length_calibration,
)

# Configuration
from focalcal.config import (
    FocalLengthConfig,
    load_focal_length_config,
    save_focal_length_config,
    create_default_focal_length_config,
)

__all__ = [
    # Errors
    "CalibrationError",
    "InvalidValueError",
    "EmptyBatchError",
    "TargetExtractionError",
    # Core types
    "CalibrationParameters",
    "TargetGeometry",
    "TargetRectangle",
    "FocalLengths",
    "TargetRectInfo",
    "CorrectionResult",
    "FocalLengthCalibration",
    "apply_focal_length_correction",
    # Frames
    "StreamIntrinsics",
    "StreamProfile",
    "Frame",
    "FrameQueue",
    # Devices
    "Context",
    "DeviceInfo",
    "DeviceFactory",
    "StaticDeviceFactory",
    # Calibration
    "TargetType",
    "check_focal_length_params",
    "validate_parameters",
    "extract_target_dimensions",
    "generate_target_image",
    "get_target_rect_info",
    "get_focal_length_correction_factor",
    "run_focal_length_calibration",
    # Configuration
    "FocalLengthConfig",
    "load_focal_length_config",
    "save_focal_length_config",
    "create_default_focal_length_config",
]
