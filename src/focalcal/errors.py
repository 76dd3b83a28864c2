"""
Exceptions raised by focalcal.

Every error derives from CalibrationError and mixes in the builtin that
callers would already catch (ValueError for bad input, RuntimeError for
failures while processing frames).
"""

from __future__ import annotations


class CalibrationError(Exception):
    """Base class for all focal-length calibration failures."""


class InvalidValueError(CalibrationError, ValueError):
    """A scan-control parameter is outside its documented range."""

    def __init__(self, field: str, value: int, minimum: int, maximum: int):
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Auto calibration failed! Given value of '{field}' {value} "
            f"is out of range ({minimum} - {maximum})."
        )


class EmptyBatchError(CalibrationError, RuntimeError):
    """The frame queue held no frames when extraction started."""


class TargetExtractionError(CalibrationError, RuntimeError):
    """The target could not be measured in the captured frames."""
