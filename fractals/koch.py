"""Koch curve and snowflake generation."""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from .raster import BLACK, WHITE, Color, rasterize
from .sink import output_path, save
from .vector import SQRT3_HALVES, magnitude, normalize


def _validate_common(iterations: int, thickness: int, image_format: str) -> None:
    if iterations < 1:
        raise ValueError("iterations must be at least 1")
    if thickness < 0:
        raise ValueError("thickness must be non-negative")
    if not image_format:
        raise ValueError("format must not be empty")


@dataclass(frozen=True)
class KochCurveConfig:
    """Options for rendering a Koch curve from arbitrary starting vertices."""

    iterations: int = 5
    width: int = 2048
    height: int = 2048
    thickness: int = 0
    color: Color = WHITE
    background: Color = BLACK
    format: str = "BMP"
    file_name: str = "koch_curve"
    output_dir: str = "images"

    def __post_init__(self) -> None:
        _validate_common(self.iterations, self.thickness, self.format)
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")


@dataclass(frozen=True)
class KochSnowflakeConfig:
    """Options for rendering a Koch snowflake into a square image."""

    iterations: int = 5
    square_dimension: int = 2048
    thickness: int = 0
    color: Color = WHITE
    background: Color = BLACK
    format: str = "BMP"
    file_name: str = "koch_snowflake"
    output_dir: str = "images"

    def __post_init__(self) -> None:
        _validate_common(self.iterations, self.thickness, self.format)
        if self.square_dimension <= 0:
            raise ValueError("square_dimension must be positive")

    def to_curve_config(self) -> KochCurveConfig:
        return KochCurveConfig(
            iterations=self.iterations,
            width=self.square_dimension,
            height=self.square_dimension,
            thickness=self.thickness,
            color=self.color,
            background=self.background,
            format=self.format,
            file_name=self.file_name,
            output_dir=self.output_dir,
        )


def koch_segment(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """Replace the segment ``p1 -> p2`` by the five vertices of one Koch step.

    ``p3`` and ``p5`` sit at the trisection points and ``p4`` at the apex of
    the equilateral triangle raised on the middle third, on the left-hand
    normal of the segment. All four resulting gaps are one third of the
    original length.

    Accepts single points of shape ``(2,)`` and returns ``(5, 2)``, or batches
    of shape ``(M, 2)`` and returns ``(M, 5, 2)``.
    """

    p1 = np.asarray(p1, dtype=np.float64)
    p2 = np.asarray(p2, dtype=np.float64)
    dist = p2 - p1
    direction = normalize(dist)
    norm = np.stack((direction[..., 1], -direction[..., 0]), axis=-1)

    p3 = p1 + dist / 3
    p5 = p1 + (2 * dist) / 3
    rise = np.asarray(magnitude(dist) / 3 * SQRT3_HALVES)
    p4 = p1 + (dist / 2 + rise[..., np.newaxis] * norm)

    return np.stack((p1.copy(), p3, p4, p5, p2.copy()), axis=-2)


def subdivide(vertices: np.ndarray) -> np.ndarray:
    """Run one Koch pass over every consecutive pair of ``vertices``.

    Neighbouring segments share their endpoint, so ``N`` vertices become
    ``4 * (N - 1) + 1``.
    """

    vertices = np.asarray(vertices, dtype=np.float64)
    if vertices.ndim != 2 or vertices.shape[1] != 2 or len(vertices) < 2:
        raise ValueError("vertices must be an (N, 2) array with N >= 2")

    segments = koch_segment(vertices[:-1], vertices[1:])
    out_vertices = np.empty((4 * (len(vertices) - 1) + 1, 2), dtype=np.float64)
    out_vertices[:-1] = segments[:, :4].reshape(-1, 2)
    out_vertices[-1] = vertices[-1]
    return out_vertices


def koch_vertices(vertices: np.ndarray, iterations: int) -> np.ndarray:
    """Refine ``vertices`` ``iterations`` times and return the finest sequence."""

    if iterations < 1:
        raise ValueError("iterations must be at least 1")
    out_vertices = np.array(vertices, dtype=np.float64)
    for _ in range(iterations):
        out_vertices = subdivide(out_vertices)
    return out_vertices


def koch_curve(
    vertices: np.ndarray,
    iterations: int | None = None,
    *,
    config: KochCurveConfig | None = None,
    **overrides,
) -> np.ndarray:
    """Generate a Koch curve from ``vertices`` and write it to an image.

    The starting vertices are refined ``config.iterations`` times, the final
    sequence is drawn once as an open polyline and saved as
    ``output_dir/file_name.<format>``. Vertices outside the image are clipped.

    Returns the finest vertex sequence, ``(N - 1) * 4**iterations + 1`` points
    for ``N`` starting vertices.
    """

    if iterations is not None:
        overrides["iterations"] = iterations
    config = replace(config or KochCurveConfig(), **overrides)
    out_vertices = koch_vertices(vertices, config.iterations)

    buffer = rasterize(
        out_vertices,
        config.width,
        config.height,
        thickness=config.thickness,
        color=config.color,
        closed=False,
        background=config.background,
    )
    save(buffer, output_path(config.output_dir, config.file_name, config.format), config.format)
    return out_vertices


def snowflake_vertices(square_dimension: float) -> np.ndarray:
    """Closed starting triangle for a snowflake that fits ``square_dimension``.

    The side is chosen so that the six-pointed star of the first iteration is
    exactly ``square_dimension`` tall, which keeps every later iteration inside
    the image as well.
    """

    side = SQRT3_HALVES * square_dimension
    v_sep = SQRT3_HALVES * (side / 3)
    h_sep = (square_dimension - side) / 2
    return np.array(
        [
            [h_sep, v_sep],
            [h_sep + side, v_sep],
            [square_dimension / 2, square_dimension],
            [h_sep, v_sep],
        ],
        dtype=np.float64,
    )


def koch_snowflake(
    iterations: int | None = None,
    square_dimension: int | None = None,
    *,
    config: KochSnowflakeConfig | None = None,
    **overrides,
) -> np.ndarray:
    """Generate a Koch snowflake centred in a square image and save it."""

    if iterations is not None:
        overrides["iterations"] = iterations
    if square_dimension is not None:
        overrides["square_dimension"] = square_dimension
    config = replace(config or KochSnowflakeConfig(), **overrides)
    vertices = snowflake_vertices(config.square_dimension)
    return koch_curve(vertices, config=config.to_curve_config())

