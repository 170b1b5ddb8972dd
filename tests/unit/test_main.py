from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from media_watermark.config.settings import Settings
from media_watermark.interception.hooks import BeforeActionRegistry
from media_watermark.main import main, watermark_file
from media_watermark.upload.models import PathBackedSource, UploadHandle


class TestWatermarkFile:
    def test_writes_processed_copy_beside_source(self, tmp_path: Path) -> None:
        source = tmp_path / "photo.png"
        source.write_bytes(b"original")
        produced = tmp_path / "produced.tmp"
        produced.write_bytes(b"watermarked")

        def _hook(params: dict[str, object]) -> None:
            params["file"] = UploadHandle(
                source=PathBackedSource(produced, owned=True),
                original_filename="photo.png",
            )

        registry = BeforeActionRegistry()
        registry.register("create", _hook)

        destination = watermark_file(registry, source)

        assert destination == tmp_path / "wm_photo.png"
        assert destination.read_bytes() == b"watermarked"
        assert not produced.exists()
        assert source.read_bytes() == b"original"

    def test_returns_none_when_upload_untouched(self, tmp_path: Path) -> None:
        source = tmp_path / "notes.txt"
        source.write_bytes(b"text")

        assert watermark_file(BeforeActionRegistry(), source) is None


class TestMain:
    def test_watermarks_local_image(
        self,
        tmp_path: Path,
        make_settings: Callable[..., Settings],
        make_image_bytes: Callable[..., bytes],
    ) -> None:
        source = tmp_path / "photo.png"
        source.write_bytes(make_image_bytes(200, 100))
        settings = make_settings(media_watermark_enabled=False)

        with patch("media_watermark.main.Settings", return_value=settings):
            assert main([str(source)]) == 0

        with Image.open(tmp_path / "wm_photo.png") as out:
            assert out.size == (200, 100)

    def test_missing_file_is_skipped(self, tmp_path: Path, make_settings: Callable[..., Settings]) -> None:
        with patch("media_watermark.main.Settings", return_value=make_settings()):
            assert main([str(tmp_path / "gone.png")]) == 0

    def test_requires_at_least_one_file(self) -> None:
        with pytest.raises(SystemExit):
            main([])
