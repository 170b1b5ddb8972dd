import shutil
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from media_watermark.logging.logger import Log
from media_watermark.pipeline.exceptions import MaterializationError
from media_watermark.upload.models import UploadHandle

CHUNK_SIZE = 16 * 1024


class SourceMaterializer:
    """Guarantees a concrete readable path for an upload's bytes."""

    def __init__(self, temp_dir: Path | None = None) -> None:
        self.temp_dir = temp_dir

    @contextmanager
    def materialize(self, handle: UploadHandle) -> Generator[Path, None, None]:
        """Yield a path holding the upload's bytes for the duration of the block.

        Path-backed uploads are yielded as-is. Anything else is spilled to a
        temp file that is removed when the block exits.

        Raises:
            MaterializationError: if the bytes cannot be drained to disk.
        """
        existing = handle.source.existing_path()
        if existing is not None:
            yield existing
            return

        spill = self._spill(handle)
        try:
            yield spill
        finally:
            spill.unlink(missing_ok=True)

    def _spill(self, handle: UploadHandle) -> Path:
        try:
            with tempfile.NamedTemporaryFile(
                prefix="dmw_src_",
                suffix=handle.extension,
                dir=self.temp_dir,
                delete=False,
            ) as tmp:
                spill = Path(tmp.name)
                try:
                    stream = handle.source.open()
                    try:
                        shutil.copyfileobj(stream, tmp, CHUNK_SIZE)
                    finally:
                        handle.source.release(stream)
                    tmp.flush()
                except Exception:
                    spill.unlink(missing_ok=True)
                    raise
        except (OSError, ValueError) as exc:
            raise MaterializationError(f"could not spill upload to disk: {exc}") from exc
        Log.debug(f"spilled upload {handle.original_filename!r} to {spill}")
        return spill
