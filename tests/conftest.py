"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after test."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def left_intrinsics():
    """Typical left infrared imager intrinsics at 1280x720."""
    from focalcal.frames import StreamIntrinsics
    return StreamIntrinsics(
        width=1280, height=720, ppx=640.0, ppy=360.0, fx=640.0, fy=641.0,
    )


@pytest.fixture
def right_intrinsics():
    """Right imager with slightly different focal lengths."""
    from focalcal.frames import StreamIntrinsics
    return StreamIntrinsics(
        width=1280, height=720, ppx=638.0, ppy=361.0, fx=642.0, fy=642.5,
    )


@pytest.fixture
def left_profile(left_intrinsics):
    from focalcal.frames import StreamProfile
    return StreamProfile(stream="infrared", index=1, intrinsics=left_intrinsics)


@pytest.fixture
def right_profile(right_intrinsics):
    from focalcal.frames import StreamProfile
    return StreamProfile(stream="infrared", index=2, intrinsics=right_intrinsics)


@pytest.fixture
def blank_pixels():
    """Non-empty Y8 buffer; content is irrelevant when a stub detector is used."""
    return np.full((48, 64), 200, dtype=np.uint8)


@pytest.fixture
def target_vertices():
    """Dot centres (TL, TR, BR, BL) of a 200 x 160 px rectangle in a 640x480 image."""
    return np.array([
        [220.0, 160.0],
        [420.0, 160.0],
        [420.0, 320.0],
        [220.0, 320.0],
    ])


@pytest.fixture
def make_queue():
    """Build a FrameQueue holding one frame per entry of pixel_list."""
    from focalcal.frames import Frame, FrameQueue

    def _make(profile, pixel_list, capacity=None):
        queue = FrameQueue(capacity=capacity or max(len(pixel_list), 1))
        for i, pixels in enumerate(pixel_list):
            queue.enqueue(Frame(pixels=pixels, profile=profile, frame_number=i))
        return queue

    return _make


class SequenceDetector:
    """Stub target detector returning preset rectangles in order."""

    def __init__(self, rectangles):
        self.rectangles = [np.asarray(r, dtype=np.float32) for r in rectangles]
        self.calls = []

    def __call__(self, frame, target_type):
        self.calls.append((frame, target_type))
        return self.rectangles[len(self.calls) - 1]


@pytest.fixture
def sequence_detector():
    """Factory for stub detectors returning the given rectangles."""
    return SequenceDetector
