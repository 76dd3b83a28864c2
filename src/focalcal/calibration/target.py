"""
Target rectangle extraction from a batch of captured frames.

Pure function over an externally owned frame queue - no threading, no state.
The queue is drained without blocking; frames that arrive after the call
starts are left for the next caller.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Union

import numpy as np

from ..errors import EmptyBatchError, TargetExtractionError
from ..frames import Frame, FrameQueue
from ..types import FocalLengths, TargetRectangle, TargetRectInfo
from .target_detection import TargetType, extract_target_dimensions

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    def on_update_progress(self, progress: float) -> None: ...


ProgressCallback = Union[Callable[[float], None], ProgressSink]
TargetDetector = Callable[[Frame, TargetType], np.ndarray]


def get_target_rect_info(
    frames: FrameQueue,
    progress: int = 0,
    progress_callback: ProgressCallback | None = None,
    detector: TargetDetector = extract_target_dimensions,
    target_type: TargetType = TargetType.ROI_RECT_GAUSSIAN_DOT_VERTICES,
) -> TargetRectInfo:
    """
    Average the target rectangle over every frame currently queued.

    Args:
        frames: Queue to drain; only frames present at call time are read
        progress: Progress value to continue counting from
        progress_callback: Called with the incremented progress after each
            measured frame (callable or object with on_update_progress)
        detector: Target-detection primitive returning 4 side lengths
        target_type: Target selector passed to the detector

    Returns:
        TargetRectInfo with the averaged rectangle, the imager's fx/fy
        and the updated progress value

    Raises:
        EmptyBatchError: If the queue is empty
        TargetExtractionError: If detection fails on a frame, or no frame
            had data
    """
    queue_size = frames.size()
    if queue_size == 0:
        raise EmptyBatchError("Extract target rectangle info - no frames in input queue!")

    report = _resolve_progress_callback(progress_callback)
    focal_lengths: FocalLengths | None = None
    measurements: list[np.ndarray] = []

    for _ in range(queue_size):
        frame = frames.poll_for_frame()
        if frame is None:
            break

        with frame:
            if frame.get_data() is None:
                continue

            if focal_lengths is None:
                intrinsics = frame.get_profile().get_intrinsics()
                focal_lengths = FocalLengths(fx=intrinsics.fx, fy=intrinsics.fy)

            measurements.append(_measure(frame, detector, target_type))

        # Frame is released before reporting progress
        progress += 1
        if report is not None:
            report(float(progress))

    logger.debug(
        "Measured target in %d of %d queued frames", len(measurements), queue_size
    )

    if not measurements:
        raise TargetExtractionError("Failed to extract the target rectangle info!")

    stacked = np.stack(measurements)
    sides = stacked.sum(axis=0, dtype=np.float32) / np.float32(len(measurements))

    return TargetRectInfo(
        rectangle=TargetRectangle.from_sides(sides),
        focal_lengths=focal_lengths,
        frame_count=len(measurements),
        progress=progress,
    )


def _measure(
    frame: Frame,
    detector: TargetDetector,
    target_type: TargetType,
) -> np.ndarray:
    try:
        sides = detector(frame, target_type)
    except TargetExtractionError:
        raise
    except Exception as e:
        raise TargetExtractionError(
            "Failed to extract target information from the captured frames!"
        ) from e

    sides = np.asarray(sides, dtype=np.float32).reshape(-1)
    if sides.shape != (4,):
        raise TargetExtractionError(
            f"Target detector returned {sides.size} values, expected 4"
        )
    return sides


def _resolve_progress_callback(
    progress_callback: ProgressCallback | None,
) -> Callable[[float], None] | None:
    if progress_callback is None:
        return None
    if hasattr(progress_callback, "on_update_progress"):
        return progress_callback.on_update_progress
    return progress_callback
