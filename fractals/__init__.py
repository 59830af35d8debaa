"""Public API for Koch and Mandelbrot fractal rendering."""

from .vector import SQRT3_HALVES, magnitude, normalize
from .raster import BLACK, WHITE, draw, draw_point, draw_segment, new_buffer, rasterize
from .sink import output_path, save, to_image
from .koch import (
    KochCurveConfig,
    KochSnowflakeConfig,
    koch_curve,
    koch_segment,
    koch_snowflake,
    koch_vertices,
    snowflake_vertices,
    subdivide,
)
from .mandelbrot import (
    ComplexWindow,
    MandelbrotConfig,
    MandelbrotResult,
    colorize,
    compute_window,
    escape_counts,
    gen_mandelbrot,
    get_color,
    get_colormap,
    test_num,
)

__all__ = [
    "BLACK",
    "ComplexWindow",
    "KochCurveConfig",
    "KochSnowflakeConfig",
    "MandelbrotConfig",
    "MandelbrotResult",
    "SQRT3_HALVES",
    "WHITE",
    "colorize",
    "compute_window",
    "draw",
    "draw_point",
    "draw_segment",
    "escape_counts",
    "gen_mandelbrot",
    "get_color",
    "get_colormap",
    "koch_curve",
    "koch_segment",
    "koch_snowflake",
    "koch_vertices",
    "magnitude",
    "new_buffer",
    "normalize",
    "output_path",
    "rasterize",
    "save",
    "snowflake_vertices",
    "subdivide",
    "test_num",
    "to_image",
]
