"""Rasterization of points, segments and polylines into RGB pixel buffers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .vector import magnitude, normalize

Color = tuple[float, float, float]

WHITE: Color = (1.0, 1.0, 1.0)
BLACK: Color = (0.0, 0.0, 0.0)


def new_buffer(width: int, height: int, background: Color = BLACK) -> np.ndarray:
    """Allocate a ``height x width x 3`` float buffer filled with ``background``."""

    if width <= 0 or height <= 0:
        raise ValueError("buffer dimensions must be positive")
    buffer = np.empty((height, width, 3), dtype=np.float64)
    buffer[...] = np.asarray(background, dtype=np.float64)
    return buffer


def draw_point(buffer: np.ndarray, center: Sequence[int], thickness: int, color: Color) -> None:
    """Paint the ``(2*thickness + 1)`` square around ``center``, clipped to the buffer."""

    height, width = buffer.shape[:2]
    x, y = int(center[0]), int(center[1])

    x_start = max(0, x - thickness)
    x_end = min(width - 1, x + thickness)
    y_start = max(0, y - thickness)
    y_end = min(height - 1, y + thickness)
    if x_start > x_end or y_start > y_end:
        return

    buffer[y_start:y_end + 1, x_start:x_end + 1] = color


def draw_segment(buffer: np.ndarray, p1: np.ndarray, p2: np.ndarray, thickness: int, color: Color) -> None:
    """Trace the segment from ``p1`` towards ``p2`` with square pen strokes.

    The pen advances ``max(2*thickness, 1)`` pixels per step and takes one step
    per unit of distance between the endpoints, so thin lines leave no gaps.
    """

    p1 = np.asarray(p1, dtype=np.float64)
    p2 = np.asarray(p2, dtype=np.float64)
    dist = p2 - p1
    mag_dist = float(magnitude(dist))
    if mag_dist == 0.0:
        draw_point(buffer, np.ceil(p1).astype(np.int64), thickness, color)
        return

    step = max(2 * thickness, 1) * normalize(dist)
    pos = p1.copy()
    for _ in range(math.ceil(mag_dist)):
        draw_point(buffer, np.ceil(pos).astype(np.int64), thickness, color)
        pos += step


def draw(buffer: np.ndarray, vertices: np.ndarray, thickness: int, color: Color, closed: bool) -> None:
    """Draw consecutive vertex pairs, plus the closing edge when ``closed``."""

    vertices = np.asarray(vertices, dtype=np.float64)
    for p1, p2 in zip(vertices[:-1], vertices[1:]):
        draw_segment(buffer, p1, p2, thickness, color)
    if closed and len(vertices) > 1:
        draw_segment(buffer, vertices[-1], vertices[0], thickness, color)


def rasterize(
    vertices: np.ndarray,
    width: int,
    height: int,
    *,
    thickness: int = 0,
    color: Color = WHITE,
    closed: bool = False,
    background: Color = BLACK,
) -> np.ndarray:
    buffer = new_buffer(width, height, background)
    draw(buffer, vertices, thickness, color, closed)
    return buffer
