"""
Gaussian-dot calibration target detection and synthetic target rendering.

The target carries four dark Gaussian dots on a light background, one at
each vertex of a rectangle of known physical size. Detection returns either
the four side lengths or the eight vertex coordinates in pixels.
"""

from __future__ import annotations

import logging
from enum import Enum

import cv2
import numpy as np

from ..errors import TargetExtractionError
from ..frames import Frame

logger = logging.getLogger(__name__)


class TargetType(Enum):
    RECT_GAUSSIAN_DOT_VERTICES = "rect_gaussian_dot_vertices"
    ROI_RECT_GAUSSIAN_DOT_VERTICES = "roi_rect_gaussian_dot_vertices"
    POS_GAUSSIAN_DOT_VERTICES = "pos_gaussian_dot_vertices"


MIN_DOT_AREA = 9  # pixels
MAX_DOT_AREA_FRACTION = 0.05  # of the searched region
MIN_DOT_FILL = 0.5  # blob area / bounding-box area


# ============================================================================
# Detection
# ============================================================================


def extract_target_dimensions(
    frame: Frame,
    target_type: TargetType = TargetType.ROI_RECT_GAUSSIAN_DOT_VERTICES,
) -> np.ndarray:
    """
    Measure the dot-vertex rectangle in a frame.

    Args:
        frame: Frame with Y8, Y16 or BGR pixel data
        target_type: RECT and ROI_RECT return side lengths; ROI_RECT only
            searches the central half of the image. POS returns vertices.

    Returns:
        (4,) float32 [top, bottom, left, right] side lengths, or
        (8,) float32 [tl_x, tl_y, tr_x, tr_y, br_x, br_y, bl_x, bl_y]

    Raises:
        TargetExtractionError: If the frame is empty or 4 dots aren't found
    """
    pixels = frame.get_data()
    if pixels is None:
        raise TargetExtractionError("Frame has no data to extract the target from")

    gray = _to_gray8(pixels)

    # Restrict search to the centre of the image for ROI targets
    x0 = y0 = 0
    if target_type is TargetType.ROI_RECT_GAUSSIAN_DOT_VERTICES:
        height, width = gray.shape
        x0, y0 = width // 4, height // 4
        gray = gray[y0:height - y0, x0:width - x0]

    vertices = find_dot_vertices(gray)
    vertices += np.array([x0, y0], dtype=np.float64)

    if target_type is TargetType.POS_GAUSSIAN_DOT_VERTICES:
        return vertices.reshape(-1).astype(np.float32)

    return rectangle_sides(vertices)


def find_dot_vertices(gray: np.ndarray) -> np.ndarray:
    """
    Locate the four target dots in an 8-bit grayscale image.

    Returns:
        (4, 2) array of (x, y) centroids ordered top-left, top-right,
        bottom-right, bottom-left

    Raises:
        TargetExtractionError: If fewer than four dot-shaped blobs are found
    """
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
    count, labels, stats, _ = cv2.connectedComponentsWithStats(binary, connectivity=8)

    max_area = MAX_DOT_AREA_FRACTION * gray.shape[0] * gray.shape[1]

    # Label 0 is the background
    candidates = []
    for label in range(1, count):
        area = stats[label, cv2.CC_STAT_AREA]
        w = stats[label, cv2.CC_STAT_WIDTH]
        h = stats[label, cv2.CC_STAT_HEIGHT]

        if area < MIN_DOT_AREA or area > max_area:
            continue
        if not 0.5 <= w / h <= 2.0:
            continue
        if area / (w * h) < MIN_DOT_FILL:
            continue

        candidates.append((area, label))

    if len(candidates) < 4:
        raise TargetExtractionError(
            f"Found {len(candidates)} target dots, need 4"
        )

    candidates.sort(reverse=True)
    if len(candidates) > 4:
        logger.debug("Found %d dot candidates, keeping the 4 largest", len(candidates))

    centroids = np.array(
        [_weighted_centroid(gray, labels == label) for _, label in candidates[:4]]
    )
    return _order_vertices(centroids)


def rectangle_sides(vertices: np.ndarray) -> np.ndarray:
    """
    Side lengths of an ordered vertex quad.

    Args:
        vertices: (4, 2) array ordered top-left, top-right, bottom-right, bottom-left

    Returns:
        (4,) float32 [top, bottom, left, right]
    """
    tl, tr, br, bl = vertices
    return np.array(
        [
            np.linalg.norm(tr - tl),
            np.linalg.norm(br - bl),
            np.linalg.norm(bl - tl),
            np.linalg.norm(br - tr),
        ],
        dtype=np.float32,
    )


def _to_gray8(pixels: np.ndarray) -> np.ndarray:
    """Convert Y8 / Y16 / BGR / BGRA pixel data to contiguous 8-bit grayscale."""
    if pixels.ndim == 3:
        channels = pixels.shape[2]
        if channels == 1:
            gray = pixels[:, :, 0]
        elif channels == 4:
            gray = cv2.cvtColor(pixels, cv2.COLOR_BGRA2GRAY)
        else:
            gray = cv2.cvtColor(pixels, cv2.COLOR_BGR2GRAY)
    else:
        gray = pixels

    if gray.dtype != np.uint8:
        gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)

    return np.ascontiguousarray(gray)


def _weighted_centroid(gray: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Darkness-weighted centroid of a blob, for sub-pixel dot centres."""
    ys, xs = np.nonzero(mask)
    weights = 255.0 - gray[ys, xs].astype(np.float64)
    total = weights.sum()
    if total <= 0:
        return np.array([xs.mean(), ys.mean()])
    return np.array([(weights * xs).sum() / total, (weights * ys).sum() / total])


def _order_vertices(points: np.ndarray) -> np.ndarray:
    by_y = points[np.argsort(points[:, 1], kind="stable")]
    top = by_y[:2][np.argsort(by_y[:2, 0], kind="stable")]
    bottom = by_y[2:][np.argsort(by_y[2:, 0], kind="stable")]
    return np.array([top[0], top[1], bottom[1], bottom[0]], dtype=np.float64)


# ============================================================================
# Synthetic Targets
# ============================================================================


def generate_target_image(
    width: int = 1280,
    height: int = 720,
    vertices: np.ndarray | None = None,
    dot_sigma: float = 6.0,
    background: int = 230,
    dot_level: int = 20,
    bgr: bool = False,
) -> np.ndarray:
    """
    Render a Gaussian-dot target.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        vertices: (4, 2) dot centres (TL, TR, BR, BL); defaults to a
            rectangle centred in the image, inside the detection ROI
        dot_sigma: Gaussian sigma of each dot in pixels
        background: Background gray level
        dot_level: Gray level at the centre of each dot
        bgr: Return a 3-channel BGR image instead of Y8

    Returns:
        uint8 image, (height, width) or (height, width, 3)
    """
    if vertices is None:
        cx, cy = width / 2.0, height / 2.0
        dx, dy = width * 0.15, height * 0.15
        vertices = np.array(
            [[cx - dx, cy - dy], [cx + dx, cy - dy], [cx + dx, cy + dy], [cx - dx, cy + dy]]
        )

    canvas = np.full((height, width), float(background), dtype=np.float64)
    depth = float(background - dot_level)
    radius = int(np.ceil(4 * dot_sigma))

    for x, y in np.asarray(vertices, dtype=np.float64):
        x_lo, x_hi = max(int(x) - radius, 0), min(int(x) + radius + 1, width)
        y_lo, y_hi = max(int(y) - radius, 0), min(int(y) + radius + 1, height)
        if x_lo >= x_hi or y_lo >= y_hi:
            continue

        xs, ys = np.meshgrid(np.arange(x_lo, x_hi), np.arange(y_lo, y_hi))
        d2 = (xs - x) ** 2 + (ys - y) ** 2
        canvas[y_lo:y_hi, x_lo:x_hi] -= depth * np.exp(-d2 / (2 * dot_sigma**2))

    img = np.clip(np.rint(canvas), 0, 255).astype(np.uint8)

    if bgr:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    return img
