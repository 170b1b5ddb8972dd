from __future__ import annotations

import importlib
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

from media_watermark.imaging.base import BaseCompositor, Gravity

if TYPE_CHECKING:
    from PIL import Image


def overlay_position(
    base_size: tuple[int, int],
    overlay_size: tuple[int, int],
    gravity: Gravity,
    offset: tuple[int, int],
) -> tuple[int, int]:
    """Top-left paste coordinates for an overlay anchored at a corner."""
    base_w, base_h = base_size
    overlay_w, overlay_h = overlay_size
    dx, dy = offset
    x = dx if gravity in (Gravity.NORTH_WEST, Gravity.SOUTH_WEST) else base_w - overlay_w - dx
    y = dy if gravity in (Gravity.NORTH_WEST, Gravity.NORTH_EAST) else base_h - overlay_h - dy
    return x, y


def _pil_image() -> ModuleType:
    # Loaded on use so a missing Pillow only disables image watermarking.
    return importlib.import_module("PIL.Image")


class PillowCompositor(BaseCompositor):
    """Composites watermarks using Pillow."""

    def is_available(self) -> bool:
        try:
            _pil_image()
        except ImportError:
            return False
        return True

    def open(self, path: Path) -> Image.Image:
        with _pil_image().open(path) as image:
            image.load()
            loaded = image.copy()
            loaded.format = image.format
            return loaded

    def size(self, image: Image.Image) -> tuple[int, int]:
        return image.size

    def resize_to_width(self, image: Image.Image, width: int) -> Image.Image:
        src_w, src_h = image.size
        width = max(1, width)
        height = max(1, int(src_h * width / src_w + 0.5))
        resized = image.resize((width, height), _pil_image().Resampling.LANCZOS)
        resized.format = image.format
        return resized

    def composite(
        self,
        base: Image.Image,
        overlay: Image.Image,
        gravity: Gravity,
        offset: tuple[int, int],
    ) -> Image.Image:
        canvas = base.convert("RGBA")
        mark = overlay.convert("RGBA")
        position = overlay_position(canvas.size, mark.size, gravity, offset)
        canvas.paste(mark, position, mark)
        result = canvas if base.mode == "RGBA" else canvas.convert(base.mode)
        result.format = base.format
        return result

    def write(self, image: Image.Image, path: Path) -> None:
        image.save(path, format=image.format)
