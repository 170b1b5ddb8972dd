import shutil
import time
from pathlib import Path

from media_watermark.pipeline.exceptions import ExternalProcessError, MaterializationError
from media_watermark.pipeline.guards import Guards
from media_watermark.transforms.base import BaseTransform, remove_quietly
from media_watermark.upload.materializer import CHUNK_SIZE, SourceMaterializer
from media_watermark.upload.models import MediaKind, PathBackedSource, UploadHandle
from media_watermark.video.base import BaseTranscoder

PROCESSED_MARKER = "watermarked_"
DEFAULT_CONTENT_TYPE = "video/mp4"


def processed_filename(original_filename: str | None) -> str:
    if original_filename:
        return f"{PROCESSED_MARKER}{original_filename}"
    return f"video_{PROCESSED_MARKER}{int(time.time())}.mp4"


def is_processed(filename: str | None) -> bool:
    """True for names this transform produces itself."""
    return filename is not None and filename.startswith(
        (PROCESSED_MARKER, f"video_{PROCESSED_MARKER}")
    )


class VideoTransform(BaseTransform):
    """Overlays the watermark onto every frame via the external transcoder."""

    kind = MediaKind.VIDEO

    def __init__(
        self,
        guards: Guards,
        materializer: SourceMaterializer,
        transcoder: BaseTranscoder,
    ) -> None:
        super().__init__(guards, materializer)
        self._transcoder = transcoder

    def _capability_available(self) -> bool:
        return self._guards.can_run_video()

    def _apply(self, handle: UploadHandle, source: Path) -> UploadHandle:
        output = self._allocate_output("video_watermarked_", ".mp4")
        try:
            outcome = self._transcoder.watermark(source, self._guards.watermark_path, output)
            produced = output.is_file() and output.stat().st_size > 0
            if not (outcome.succeeded and produced):
                raise ExternalProcessError(
                    "ffmpeg failed or produced empty output",
                    returncode=outcome.returncode,
                    stderr=outcome.stderr,
                )
            wrapper = self._copy_out(output)
        finally:
            remove_quietly(output)

        return UploadHandle(
            source=PathBackedSource(wrapper, owned=True),
            original_filename=processed_filename(handle.original_filename),
            content_type=handle.content_type or DEFAULT_CONTENT_TYPE,
        )

    def _copy_out(self, output: Path) -> Path:
        """Copy the transcoder output into a file owned by the new handle."""
        wrapper = self._allocate_output("dmw_upload_", ".mp4")
        try:
            with output.open("rb") as src, wrapper.open("wb") as dst:
                shutil.copyfileobj(src, dst, CHUNK_SIZE)
        except OSError as exc:
            remove_quietly(wrapper)
            raise MaterializationError(f"could not copy transcoder output: {exc}") from exc
        return wrapper
