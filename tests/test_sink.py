"""
test_sink.py
"""
from pathlib import Path

import numpy as np
import PIL.Image
import pytest

from fractals.raster import new_buffer
from fractals.sink import output_path, save, to_image


def test_output_path_lowercases_the_format():
    assert output_path("images", "koch_curve", "BMP") == Path("images/koch_curve.bmp")
    assert output_path("out", "Mandelbrot", ".PNG") == Path("out/Mandelbrot.png")


def test_to_image_scales_and_truncates_channels():
    buffer = np.array([[[1.0, 0.5, 0.0], [2.0, -1.0, 0.25]]])
    image = to_image(buffer)
    assert image.mode == "RGB"
    assert image.size == (2, 1)
    assert image.getpixel((0, 0)) == (255, 127, 0)
    assert image.getpixel((1, 0)) == (255, 0, 63)


def test_save_appends_extension_and_creates_directories(tmp_path):
    buffer = new_buffer(3, 2, (1.0, 0.0, 0.0))
    path = save(buffer, tmp_path / "nested" / "picture", "PNG")

    assert path == tmp_path / "nested" / "picture.png"
    with PIL.Image.open(path) as image:
        assert image.format == "PNG"
        assert image.size == (3, 2)
        assert image.getpixel((2, 1)) == (255, 0, 0)


def test_save_keeps_matching_extension(tmp_path):
    path = save(new_buffer(2, 2), tmp_path / "picture.bmp", "BMP")
    assert path == tmp_path / "picture.bmp"
    assert path.is_file()


@pytest.mark.parametrize("image_format, extension, pil_format", [
    ("JPG", ".jpg", "JPEG"),
    ("JPEG", ".jpeg", "JPEG"),
    ("TIF", ".tif", "TIFF"),
])
def test_save_maps_format_aliases(tmp_path, image_format, extension, pil_format):
    path = save(new_buffer(4, 4), tmp_path / "picture", image_format)
    assert path.suffix == extension
    with PIL.Image.open(path) as image:
        assert image.format == pil_format


def test_save_pdf(tmp_path):
    path = save(new_buffer(4, 4), tmp_path / "picture", "PDF")
    assert path.read_bytes().startswith(b"%PDF")


def test_save_propagates_unknown_format(tmp_path):
    with pytest.raises((KeyError, ValueError)):
        save(new_buffer(2, 2), tmp_path / "picture", "NOT-A-FORMAT")


def test_save_rejects_empty_format(tmp_path):
    with pytest.raises(ValueError):
        save(new_buffer(2, 2), tmp_path / "picture", "")
