"""Two-component vector helpers shared by the geometry and raster code."""

from __future__ import annotations

import numpy as np

SQRT3_HALVES = np.sqrt(3.0) / 2.0


def magnitude(v: np.ndarray) -> np.ndarray:
    """Euclidean norm of a point, or of every point along the last axis."""

    v = np.asarray(v, dtype=np.float64)
    return np.sqrt(v[..., 0] ** 2 + v[..., 1] ** 2)


def normalize(v: np.ndarray) -> np.ndarray:
    """Return ``v`` scaled to unit length.

    Raises ``ValueError`` when ``v`` (or any row of a batch) has zero length.
    """

    v = np.asarray(v, dtype=np.float64)
    mag = np.asarray(magnitude(v))
    if np.any(mag == 0.0):
        raise ValueError("cannot normalize a zero-length vector")
    return v / mag[..., np.newaxis]
