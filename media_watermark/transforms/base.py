import contextlib
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from media_watermark.logging.logger import Log
from media_watermark.pipeline.exceptions import (
    AssetMissingError,
    CapabilityUnavailableError,
    ExternalProcessError,
    SkipError,
    SourceTooLargeError,
)
from media_watermark.pipeline.guards import Guards
from media_watermark.upload.materializer import SourceMaterializer
from media_watermark.upload.models import MediaKind, UploadHandle

STDERR_EXCERPT_CHARS = 2000


def remove_quietly(path: Path) -> None:
    """Best-effort delete; a file that cannot be removed is left behind."""
    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)


class BaseTransform(ABC):
    """Runs the guards and materialization shared by every transform.

    ``process`` never raises: every failure is logged and turned into None so
    the original upload can proceed.
    """

    kind: MediaKind

    def __init__(self, guards: Guards, materializer: SourceMaterializer) -> None:
        self._guards = guards
        self._materializer = materializer

    def process(self, handle: UploadHandle) -> UploadHandle | None:
        try:
            return self._process(handle)
        except SkipError as exc:
            Log.debug(f"{self.kind.value} processing skipped: {exc}")
        except ExternalProcessError as exc:
            stderr = exc.stderr.strip()[-STDERR_EXCERPT_CHARS:]
            Log.error(
                f"{self.kind.value} processing failed: {type(exc).__name__} {exc} "
                f"(exit status {exc.returncode})\n{stderr}"
            )
        except Exception as exc:
            Log.failure(f"{self.kind.value} processing failed", exc)
        return None

    def _process(self, handle: UploadHandle) -> UploadHandle:
        if not self._capability_available():
            raise CapabilityUnavailableError(f"{self.kind.value} tooling is not available")
        if not self._guards.watermark_present():
            raise AssetMissingError(f"watermark asset missing at {self._guards.watermark_path}")
        with self._materializer.materialize(handle) as source:
            if not self._guards.size_ok(source):
                raise SourceTooLargeError(f"{source} is missing or exceeds the size limit")
            return self._apply(handle, source)

    def _allocate_output(self, prefix: str, suffix: str) -> Path:
        fd, name = tempfile.mkstemp(
            prefix=prefix, suffix=suffix, dir=self._materializer.temp_dir
        )
        os.close(fd)
        return Path(name)

    @abstractmethod
    def _capability_available(self) -> bool:
        """Return True if the tooling this transform needs is installed."""

    @abstractmethod
    def _apply(self, handle: UploadHandle, source: Path) -> UploadHandle:
        """Produce the watermarked handle from a materialized source path."""
