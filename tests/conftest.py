import io
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from media_watermark.config.settings import Settings
from media_watermark.upload.models import PathBackedSource, StreamBackedSource, UploadHandle

WATERMARK_COLOR = (255, 0, 0, 255)
BACKGROUND_COLOR = (255, 255, 255)


def image_bytes(
    width: int,
    height: int,
    color: tuple[int, ...] = BACKGROUND_COLOR,
    mode: str = "RGB",
    fmt: str = "PNG",
) -> bytes:
    buf = io.BytesIO()
    Image.new(mode, (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def watermark_asset(tmp_path: Path) -> Path:
    """An opaque red 100x50 watermark on disk."""
    path = tmp_path / "assets" / "watermark.png"
    path.parent.mkdir(parents=True)
    path.write_bytes(image_bytes(100, 50, WATERMARK_COLOR, mode="RGBA"))
    return path


@pytest.fixture()
def png_upload(tmp_path: Path) -> Callable[..., UploadHandle]:
    """Build a path-backed PNG upload of the requested size."""

    def _make(
        width: int = 400,
        height: int = 300,
        filename: str = "photo.png",
        content_type: str | None = "image/png",
    ) -> UploadHandle:
        path = tmp_path / "uploads" / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(image_bytes(width, height))
        return UploadHandle(
            source=PathBackedSource(path),
            original_filename=filename,
            content_type=content_type,
        )

    return _make


@pytest.fixture()
def stream_upload() -> Callable[..., UploadHandle]:
    """Build an in-memory upload with no backing file."""

    def _make(
        data: bytes = b"\x00\x01video-bytes",
        filename: str | None = "clip.mp4",
        content_type: str | None = "video/mp4",
    ) -> UploadHandle:
        return UploadHandle(
            source=StreamBackedSource(io.BytesIO(data)),
            original_filename=filename,
            content_type=content_type,
        )

    return _make


@pytest.fixture()
def make_settings(tmp_path: Path, watermark_asset: Path) -> Callable[..., Settings]:
    """Settings pointing at the temp watermark, enabled unless overridden."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "media_watermark_enabled": True,
            "watermark_asset_path": watermark_asset,
            "temp_dir": tmp_path,
        }
        values.update(overrides)
        return Settings(**values)  # type: ignore[arg-type]

    return _make


@pytest.fixture()
def make_image_bytes() -> Callable[..., bytes]:
    return image_bytes
