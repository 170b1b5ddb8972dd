import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from media_watermark.config.settings import Settings
from media_watermark.interception.interceptor import InterceptionState, build_interceptor
from media_watermark.upload.models import PathBackedSource, UploadHandle

pytestmark = pytest.mark.skipif(shutil.which("ffmpeg") is None, reason="ffmpeg not on PATH")


@pytest.fixture()
def sample_video(tmp_path: Path) -> Path:
    """A one-second 320x240 test pattern with a sine audio track."""
    path = tmp_path / "uploads" / "clip.mp4"
    path.parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(
        [
            "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
            "-f", "lavfi", "-i", "testsrc=size=320x240:rate=10:duration=1",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=1",
            "-c:v", "libx264", "-pix_fmt", "yuv420p", "-c:a", "aac", "-shortest",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.mark.integration
class TestVideoUploadEndToEnd:
    def test_video_upload_is_replaced(
        self,
        tmp_path: Path,
        sample_video: Path,
        make_settings: Callable[..., Settings],
    ) -> None:
        settings = make_settings()
        interceptor = build_interceptor(settings, settings_provider=lambda: settings)
        upload = UploadHandle(
            source=PathBackedSource(sample_video),
            original_filename="clip.mp4",
            content_type="video/mp4",
        )
        params: dict[str, Any] = {"file": upload, "qqfile": upload}

        state = interceptor.before_create(params)

        assert state is InterceptionState.SUBSTITUTED
        processed = params["file"]
        assert "qqfile" not in params
        assert processed.original_filename == "watermarked_clip.mp4"
        assert processed.content_type == "video/mp4"
        assert processed.read_bytes()[4:8] == b"ftyp"
        assert list(tmp_path.glob("video_watermarked_*")) == []
        processed.discard()

    def test_second_pass_is_a_noop(
        self,
        sample_video: Path,
        make_settings: Callable[..., Settings],
    ) -> None:
        settings = make_settings()
        interceptor = build_interceptor(settings, settings_provider=lambda: settings)
        params: dict[str, Any] = {
            "file": UploadHandle(source=PathBackedSource(sample_video), original_filename="clip.mp4")
        }
        interceptor.before_create(params)
        once = params["file"]
        once_bytes = once.read_bytes()

        state = interceptor.before_create(params)

        assert state is InterceptionState.SKIPPED
        assert params["file"] is once
        assert once.read_bytes() == once_bytes
        once.discard()

    def test_undecodable_video_fails_open(
        self,
        tmp_path: Path,
        make_settings: Callable[..., Settings],
    ) -> None:
        bogus = tmp_path / "bogus.mp4"
        bogus.write_bytes(b"not really a video")
        settings = make_settings()
        interceptor = build_interceptor(settings, settings_provider=lambda: settings)
        upload = UploadHandle(source=PathBackedSource(bogus), original_filename="bogus.mp4")
        params: dict[str, Any] = {"file": upload}

        assert interceptor.before_create(params) is InterceptionState.SKIPPED
        assert params["file"] is upload
        assert list(tmp_path.glob("video_watermarked_*")) == []
        assert list(tmp_path.glob("dmw_upload_*")) == []
