"""Persistence of pixel buffers through Pillow."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import PIL.Image


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def output_path(output_dir: str | Path, file_name: str, image_format: str) -> Path:
    """Build ``output_dir/file_name.<format>`` with a lower-cased extension."""

    extension = image_format.lower().lstrip(".")
    return Path(output_dir).expanduser() / f"{file_name}.{extension}"


def to_image(buffer: np.ndarray) -> PIL.Image.Image:
    """Convert a ``[0, 1]`` float RGB buffer into an 8-bit Pillow image."""

    rgb_uint8 = np.uint8(np.clip(buffer * 255, 0, 255))
    return PIL.Image.fromarray(rgb_uint8)


def save(buffer: np.ndarray, path: str | Path, image_format: str) -> Path:
    """Encode ``buffer`` as ``image_format`` at ``path``.

    The lower-cased format is appended as the file extension unless ``path``
    already ends with it. Pillow errors for unknown formats or unwritable
    locations propagate to the caller.
    """

    extension = image_format.lower().lstrip(".")
    if not extension:
        raise ValueError("image format must not be empty")
    path = Path(path).expanduser()
    if path.suffix.lower() != f".{extension}":
        path = path.with_name(f"{path.name}.{extension}")

    path.parent.mkdir(parents=True, exist_ok=True)
    to_image(buffer).save(str(path), format=_pil_format_name(extension))
    return path
