"""
devices.py - Device discovery interface.

A DeviceFactory belongs to one Context and answers two questions:
which devices are present (filtered by a product-line mask), and which
devices were added or removed since the last notification.

Usage:
    from focalcal.devices import (
        Context, StaticDeviceFactory, DeviceInfo,
        PRODUCT_LINE_D400, PRODUCT_LINE_DEPTH,
    )

    factory = StaticDeviceFactory(Context())
    factory.set_devices_changed_callback(
        lambda removed, added: print(f"-{len(removed)} +{len(added)}")
    )
    factory.add_device(DeviceInfo("123456", "Depth Camera D435", PRODUCT_LINE_D400))
    for info in factory.query_devices(PRODUCT_LINE_DEPTH):
        print(info.name)
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# ============================================================================
# Product Lines
# ============================================================================

PRODUCT_LINE_ANY = 0xFF
PRODUCT_LINE_NON_INTEL = 0x01
PRODUCT_LINE_D400 = 0x02
PRODUCT_LINE_SR300 = 0x04
PRODUCT_LINE_L500 = 0x08
PRODUCT_LINE_T200 = 0x10
PRODUCT_LINE_DEPTH = PRODUCT_LINE_L500 | PRODUCT_LINE_SR300 | PRODUCT_LINE_D400
PRODUCT_LINE_TRACKING = PRODUCT_LINE_T200

# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """Identifies a device that can be opened for streaming."""
    serial_number: str
    name: str
    product_line: int = PRODUCT_LINE_D400
    firmware_version: str = ""

@dataclass(frozen=True, slots=True)
class Context:
    """Settings shared by every factory of a context."""
    device_mask: int = PRODUCT_LINE_ANY

DevicesChangedCallback = Callable[[list[DeviceInfo], list[DeviceInfo]], None]

# ============================================================================
# Factories
# ============================================================================

class DeviceFactory(ABC):
    """
    Interface for device factories.

    Callbacks receive (devices_removed, devices_added). A factory belongs
    to exactly one context.
    """

    def __init__(self, context: Context):
        self.context = context
        self._callback: Optional[DevicesChangedCallback] = None

    @abstractmethod
    def query_devices(self, mask: int) -> list[DeviceInfo]:
        """Devices matching both mask and the context's device mask."""

    def set_devices_changed_callback(self, callback: Optional[DevicesChangedCallback]) -> None:
        self._callback = callback

    def _matches(self, info: DeviceInfo, mask: int) -> bool:
        return bool(info.product_line & mask & self.context.device_mask)

    def _notify(self, removed: list[DeviceInfo], added: list[DeviceInfo]) -> None:
        if not removed and not added:
            return
        logger.debug("Devices changed: %d removed, %d added", len(removed), len(added))
        if self._callback is not None:
            self._callback(removed, added)


class StaticDeviceFactory(DeviceFactory):
    """In-memory factory; devices are added and removed explicitly."""

    def __init__(self, context: Context, devices: Optional[list[DeviceInfo]] = None):
        super().__init__(context)
        self._lock = threading.Lock()
        self._devices: dict[str, DeviceInfo] = {}
        for info in devices or []:
            self._devices[info.serial_number] = info

    def query_devices(self, mask: int) -> list[DeviceInfo]:
        with self._lock:
            devices = list(self._devices.values())
        return [info for info in devices if self._matches(info, mask)]

    def add_device(self, info: DeviceInfo) -> None:
        """Add (or replace) a device and notify the callback."""
        with self._lock:
            previous = self._devices.get(info.serial_number)
            self._devices[info.serial_number] = info

        removed = [previous] if previous is not None and previous != info else []
        added = [info] if previous != info else []
        self._notify(removed, added)

    def remove_device(self, serial_number: str) -> bool:
        """Remove a device by serial number. Returns False if it wasn't present."""
        with self._lock:
            info = self._devices.pop(serial_number, None)

        if info is None:
            return False
        self._notify([info], [])
        return True
