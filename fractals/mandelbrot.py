"""Escape-time rendering of the Mandelbrot set."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

import numpy as np
import tensorflow as tf
from matplotlib import colormaps
from matplotlib.colors import Colormap

from .raster import BLACK, Color
from .sink import output_path, save

HORIZON_SQUARED = 4.0
R_MIN = -3.0
R_MAX = 2.0
I_MIN = -1.3

ColorScheme = Union[str, Colormap]


@dataclass(frozen=True)
class MandelbrotConfig:
    """Parameters that describe a single Mandelbrot image."""

    width: int = 1280
    height: int = 720
    max_iter: int = 50
    color_scheme: ColorScheme = "Blues_r"
    format: str = "BMP"
    file_name: str = "Mandelbrot"
    output_dir: str = "images"
    device: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1")
        if not self.format:
            raise ValueError("format must not be empty")


@dataclass(frozen=True)
class ComplexWindow:
    """Sampling grid mapping pixels onto the complex plane.

    Pixels are square: the real axis spans ``[R_MIN, R_MAX)`` across the image
    width and the imaginary axis grows from ``I_MIN`` by the same step per row.
    """

    r_min: float
    i_min: float
    pixel_size: float
    width: int
    height: int

    @property
    def i_max(self) -> float:
        return self.i_min + self.height * self.pixel_size

    def pixel_to_complex(self, x: int, y: int) -> complex:
        return complex(self.r_min + x * self.pixel_size, self.i_min + y * self.pixel_size)


@dataclass(frozen=True)
class MandelbrotResult:
    """Container for a rendered Mandelbrot image."""

    image: np.ndarray
    iterations: np.ndarray
    window: ComplexWindow
    path: Optional[Path]


def get_colormap(scheme: ColorScheme) -> Colormap:
    if isinstance(scheme, str):
        return colormaps[scheme]
    return scheme


def compute_window(width: int, height: int) -> ComplexWindow:
    pixel_size = (R_MAX - R_MIN) / width
    return ComplexWindow(r_min=R_MIN, i_min=I_MIN, pixel_size=pixel_size, width=width, height=height)


def test_num(c: complex, max_iter: int) -> int:
    """Escape-time test for ``c``.

    Iterates ``z = z*z + c`` from ``z = 0`` and returns the 1-based iteration
    at which ``|z|**2 >= 4``, or ``max_iter + 1`` if ``c`` never escaped.
    """

    z = 0j
    i = 1
    while i <= max_iter:
        z = z * z + c
        if z.real * z.real + z.imag * z.imag >= HORIZON_SQUARED:
            break
        i += 1
    return i


def _normalized(iterations, max_iter: int):
    if max_iter <= 1:
        return np.zeros_like(np.asarray(iterations, dtype=np.float64))
    t = (np.asarray(iterations, dtype=np.float64) - 1.0) / (max_iter - 1.0)
    return np.clip(t, 0.0, 1.0)


def get_color(scheme: ColorScheme, iterations: int, max_iter: int) -> Color:
    """Map an escape count onto ``scheme``; points that never escaped are black."""

    if iterations > max_iter:
        return BLACK
    rgba = get_colormap(scheme)(float(_normalized(iterations, max_iter)))
    return (float(rgba[0]), float(rgba[1]), float(rgba[2]))


def colorize(iterations: np.ndarray, max_iter: int, scheme: ColorScheme) -> np.ndarray:
    """Apply :func:`get_color` to every entry of an escape-count array."""

    iterations = np.asarray(iterations)
    rgba = np.array(get_colormap(scheme)(_normalized(iterations, max_iter)), dtype=np.float64, copy=True)
    image = rgba[..., :3]
    inside = iterations > max_iter
    for k in (0, 1, 2):
        image[..., k] = np.where(inside, BLACK[k], image[..., k])
    return np.ascontiguousarray(image)


@tf.function
def _mandelbrot_step(
    zr: tf.Tensor, zi: tf.Tensor, cr: tf.Tensor, ci: tf.Tensor, ns: tf.Tensor, active: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped by one iteration."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = zr * zi + zi * zr + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    horizon = tf.constant(HORIZON_SQUARED, dtype=zr.dtype)
    still_active = tf.logical_and(active, zr * zr + zi * zi < horizon)
    ns = ns + tf.cast(still_active, tf.int32)
    return zr, zi, ns, still_active


@tf.function
def _mandelbrot_run(
    cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Iterate the escape-time loop with a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    ns = tf.ones_like(cr, tf.int32)
    active = tf.ones_like(ns, tf.bool)

    def cond(i, zr, zi, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, ns, active):
        zr, zi, ns, active = _mandelbrot_step(zr, zi, cr, ci, ns, active)
        return i + 1, zr, zi, ns, active

    return tf.while_loop(cond, body, (i, zr, zi, ns, active))


def escape_counts(window: ComplexWindow, max_iter: int, *, device: Optional[str] = None) -> np.ndarray:
    """Evaluate :func:`test_num` for every pixel of ``window`` in one batch.

    Returns an ``int32`` array of shape ``(height, width)``; entry ``[y, x]``
    equals ``test_num(window.pixel_to_complex(x, y), max_iter)``.
    """

    x = window.r_min + np.arange(window.width, dtype=np.float64) * window.pixel_size
    y = window.i_min + np.arange(window.height, dtype=np.float64) * window.pixel_size

    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(x, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(y, dtype=tf.float64)
        cr, ci = tf.meshgrid(x_tf, y_tf)
        max_iterations = tf.constant(max_iter, dtype=tf.int32)
        _, _, _, ns, _ = _mandelbrot_run(cr, ci, max_iterations)

    return ns.numpy()


def gen_mandelbrot(
    width: Optional[int] = None,
    height: Optional[int] = None,
    max_iter: Optional[int] = None,
    color_scheme: Optional[ColorScheme] = None,
    *,
    config: Optional[MandelbrotConfig] = None,
    persist: bool = True,
    **overrides,
) -> MandelbrotResult:
    """Render the fixed Mandelbrot window and save it as an image.

    Every pixel is mapped onto the complex plane, tested with the escape-time
    loop and colored with :func:`get_color`. The output is deterministic for
    identical inputs. With ``persist=False`` the image is only returned.
    """

    for name, value in (("width", width), ("height", height), ("max_iter", max_iter), ("color_scheme", color_scheme)):
        if value is not None:
            overrides[name] = value
    config = replace(config or MandelbrotConfig(), **overrides)

    cmap = get_colormap(config.color_scheme)
    window = compute_window(config.width, config.height)
    iterations = escape_counts(window, config.max_iter, device=config.device)
    image = colorize(iterations, config.max_iter, cmap)

    path = None
    if persist:
        path = save(image, output_path(config.output_dir, config.file_name, config.format), config.format)
    return MandelbrotResult(image=image, iterations=iterations, window=window, path=path)
