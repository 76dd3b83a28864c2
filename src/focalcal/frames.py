"""
frames.py - Frames, stream profiles and the bounded frame queue.

Usage:
    from focalcal.frames import Frame, FrameQueue, StreamProfile, StreamIntrinsics

    intrinsics = StreamIntrinsics(width=1280, height=720, ppx=640.0, ppy=360.0,
                                  fx=640.0, fy=640.0)
    profile = StreamProfile(stream="infrared", index=1, intrinsics=intrinsics)

    queue = FrameQueue(capacity=30)
    queue.enqueue(Frame(pixels=image, profile=profile, frame_number=0))

    frame = queue.poll_for_frame()
    with frame:
        print(frame.get_profile().get_intrinsics().fx)
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_CAPACITY = 1

# ============================================================================
# Stream Profiles
# ============================================================================

@dataclass(frozen=True, slots=True)
class StreamIntrinsics:
    """Pinhole intrinsics of a video stream."""
    width: int
    height: int
    ppx: float
    ppy: float
    fx: float
    fy: float
    model: str = "brown_conrady"
    coeffs: tuple[float, ...] = (0.0, 0.0, 0.0, 0.0, 0.0)

@dataclass(frozen=True, slots=True)
class StreamProfile:
    """Describes the stream a frame belongs to."""
    stream: str  # "infrared", "depth", "color"
    index: int = 0  # 1 = left imager, 2 = right imager for infrared
    format: str = "y8"
    fps: int = 30
    intrinsics: Optional[StreamIntrinsics] = None

    def get_intrinsics(self) -> StreamIntrinsics:
        if self.intrinsics is None:
            raise ValueError(f"Stream profile {self.stream}/{self.index} has no intrinsics")
        return self.intrinsics

# ============================================================================
# Frames
# ============================================================================

@dataclass
class Frame:
    """
    A captured frame holding its pixel buffer until released.

    Release drops the buffer reference and fires on_release once, so the
    owner can recycle the underlying memory.
    """
    pixels: Optional[np.ndarray]
    profile: StreamProfile
    frame_number: int = 0
    timestamp_ms: float = 0.0
    on_release: Optional[Callable[["Frame"], None]] = field(default=None, repr=False)
    _released: bool = field(default=False, repr=False)

    def get_data(self) -> Optional[np.ndarray]:
        """Pixel data, or None when the frame is empty or released."""
        if self._released or self.pixels is None or self.pixels.size == 0:
            return None
        return self.pixels

    def get_profile(self) -> StreamProfile:
        return self.profile

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the pixel buffer. Calling again is a no-op."""
        if self._released:
            return
        self._released = True
        self.pixels = None
        if self.on_release is not None:
            self.on_release(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

# ============================================================================
# Frame Queue
# ============================================================================

class FrameQueue:
    """
    Bounded, thread-safe queue of frames.

    A producer thread enqueues while a single consumer drains. When the
    queue is full the oldest frame is dropped and released (keep-latest).
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Queue capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._frames: deque[Frame] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)

    def size(self) -> int:
        """Number of frames currently enqueued."""
        with self._lock:
            return len(self._frames)

    def __len__(self) -> int:
        return self.size()

    def enqueue(self, frame: Frame) -> None:
        """Add a frame, dropping the oldest one if the queue is full."""
        dropped = None
        with self._lock:
            if len(self._frames) >= self.capacity:
                dropped = self._frames.popleft()
            self._frames.append(frame)
            self._not_empty.notify()

        if dropped is not None:
            logger.debug("Frame queue full, dropping frame %d", dropped.frame_number)
            dropped.release()

    def poll_for_frame(self) -> Optional[Frame]:
        """Dequeue a frame without blocking. Returns None if empty."""
        with self._lock:
            if not self._frames:
                return None
            return self._frames.popleft()

    def wait_for_frame(self, timeout: float = 5.0) -> Frame:
        """
        Dequeue a frame, blocking up to timeout seconds.

        Raises:
            TimeoutError: If no frame arrives in time
        """
        deadline = time.monotonic() + timeout
        with self._not_empty:
            while not self._frames:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError(f"Frame didn't arrive within {timeout} seconds")
                self._not_empty.wait(remaining)
            return self._frames.popleft()

    def flush(self) -> int:
        """Release every queued frame. Returns how many were dropped."""
        with self._lock:
            frames = list(self._frames)
            self._frames.clear()

        for frame in frames:
            frame.release()
        return len(frames)
