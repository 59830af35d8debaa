from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import PIL.Image

EXAMPLES_ROOT = Path("examples/cli-options")
KOCH_ARGS = ["--iterations", "3"]
CURVE_ARGS = [*KOCH_ARGS, "--width", "243", "--height", "120"]
SNOWFLAKE_ARGS = [*KOCH_ARGS, "--square-dimension", "240"]
MANDELBROT_ARGS = ["--width", "160", "--height", "90"]


@dataclass
class Example:
    name: str
    command: str
    args: list[str]
    file_name: str
    size: tuple[int, int]

    @property
    def output_dir(self) -> Path:
        return EXAMPLES_ROOT / self.name

    @property
    def image_path(self) -> Path:
        return self.output_dir / self.file_name

    def cli_args(self) -> list[str]:
        return [self.command, *self.args, "--output-dir", str(self.output_dir)]

    def full_args(self) -> list[str]:
        return [sys.executable, "fractal.py", *self.cli_args()]


EXAMPLES: list[Example] = [
    Example("curve-defaults", "koch-curve", CURVE_ARGS, "koch_curve.bmp", (243, 120)),
    Example("curve-iterations", "koch-curve", [*CURVE_ARGS, "--iterations", "5"], "koch_curve.bmp", (243, 120)),
    Example("curve-thickness", "koch-curve", [*CURVE_ARGS, "--thickness", "1"], "koch_curve.bmp", (243, 120)),
    Example(
        "curve-color",
        "koch-curve",
        [*CURVE_ARGS, "--color", "#ffcc00", "--background", "#101830"],
        "koch_curve.bmp",
        (243, 120),
    ),
    Example(
        "curve-endpoints",
        "koch-curve",
        [*CURVE_ARGS, "--start", "20", "100", "--end", "220", "100"],
        "koch_curve.bmp",
        (243, 120),
    ),
    Example("curve-format", "koch-curve", [*CURVE_ARGS, "--format", "PNG"], "koch_curve.png", (243, 120)),
    Example("snowflake-defaults", "koch-snowflake", SNOWFLAKE_ARGS, "koch_snowflake.bmp", (240, 240)),
    Example("snowflake-file-name", "koch-snowflake", [*SNOWFLAKE_ARGS, "--file-name", "flake"], "flake.bmp", (240, 240)),
    Example("snowflake-jpeg", "koch-snowflake", [*SNOWFLAKE_ARGS, "--format", "JPEG"], "koch_snowflake.jpeg", (240, 240)),
    Example("mandelbrot-defaults", "mandelbrot", MANDELBROT_ARGS, "Mandelbrot.bmp", (160, 90)),
    Example("mandelbrot-max-iter", "mandelbrot", [*MANDELBROT_ARGS, "--max-iter", "200"], "Mandelbrot.bmp", (160, 90)),
    Example("mandelbrot-colormap", "mandelbrot", [*MANDELBROT_ARGS, "--colormap", "inferno"], "Mandelbrot.bmp", (160, 90)),
    Example("mandelbrot-format", "mandelbrot", [*MANDELBROT_ARGS, "--format", "PNG"], "Mandelbrot.png", (160, 90)),
]


def check_image(example: Example) -> None:
    """Raise unless ``example`` left a decodable image of the requested size."""

    if not example.image_path.is_file():
        raise RuntimeError(f"{example.name}: {example.image_path} was not written")
    with PIL.Image.open(example.image_path) as image:
        if image.size != example.size:
            raise RuntimeError(f"{example.name}: expected {example.size}, got {image.size}")


def render(example: Example) -> None:
    shutil.rmtree(example.output_dir, ignore_errors=True)
    subprocess.run(example.full_args(), check=True)
    check_image(example)


def main() -> None:
    for example in EXAMPLES:
        print(f"[cli-example] {example.name}")
        render(example)
    print(f"{len(EXAMPLES)} images written under {EXAMPLES_ROOT}")


if __name__ == "__main__":
    main()
