"""
Tests for focalcal.devices.
"""

import pytest

from focalcal.devices import (
    PRODUCT_LINE_ANY,
    PRODUCT_LINE_D400,
    PRODUCT_LINE_DEPTH,
    PRODUCT_LINE_L500,
    PRODUCT_LINE_T200,
    PRODUCT_LINE_TRACKING,
    Context,
    DeviceFactory,
    DeviceInfo,
    StaticDeviceFactory,
)


@pytest.fixture
def d435():
    return DeviceInfo(serial_number="012345", name="Depth Camera D435", product_line=PRODUCT_LINE_D400)


@pytest.fixture
def t265():
    return DeviceInfo(serial_number="998877", name="Tracking Camera T265", product_line=PRODUCT_LINE_T200)


class TestProductLines:
    def test_masks(self):
        assert PRODUCT_LINE_DEPTH & PRODUCT_LINE_D400
        assert not PRODUCT_LINE_DEPTH & PRODUCT_LINE_T200
        assert PRODUCT_LINE_TRACKING == PRODUCT_LINE_T200


class TestDeviceFactory:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            DeviceFactory(Context())


class TestStaticDeviceFactory:
    def test_query_by_mask(self, d435, t265):
        factory = StaticDeviceFactory(Context(), [d435, t265])

        assert factory.query_devices(PRODUCT_LINE_ANY) == [d435, t265]
        assert factory.query_devices(PRODUCT_LINE_DEPTH) == [d435]
        assert factory.query_devices(PRODUCT_LINE_TRACKING) == [t265]
        assert factory.query_devices(PRODUCT_LINE_L500) == []

    def test_context_mask_applies(self, d435, t265):
        factory = StaticDeviceFactory(Context(device_mask=PRODUCT_LINE_T200), [d435, t265])
        assert factory.query_devices(PRODUCT_LINE_ANY) == [t265]

    def test_add_notifies(self, d435):
        factory = StaticDeviceFactory(Context())
        events = []
        factory.set_devices_changed_callback(lambda removed, added: events.append((removed, added)))

        factory.add_device(d435)

        assert events == [([], [d435])]
        assert factory.query_devices(PRODUCT_LINE_ANY) == [d435]

    def test_re_adding_same_device_is_silent(self, d435):
        factory = StaticDeviceFactory(Context(), [d435])
        events = []
        factory.set_devices_changed_callback(lambda removed, added: events.append((removed, added)))

        factory.add_device(d435)

        assert events == []

    def test_replacing_device_reports_both(self, d435):
        factory = StaticDeviceFactory(Context(), [d435])
        events = []
        factory.set_devices_changed_callback(lambda removed, added: events.append((removed, added)))

        updated = DeviceInfo(serial_number=d435.serial_number, name=d435.name, firmware_version="5.16.0")
        factory.add_device(updated)

        assert events == [([d435], [updated])]

    def test_remove_notifies(self, d435):
        factory = StaticDeviceFactory(Context(), [d435])
        events = []
        factory.set_devices_changed_callback(lambda removed, added: events.append((removed, added)))

        assert factory.remove_device(d435.serial_number) is True
        assert factory.remove_device(d435.serial_number) is False

        assert events == [([d435], [])]
        assert factory.query_devices(PRODUCT_LINE_ANY) == []

    def test_no_callback(self, d435):
        factory = StaticDeviceFactory(Context())
        factory.add_device(d435)
        factory.set_devices_changed_callback(None)
        assert factory.remove_device(d435.serial_number)
