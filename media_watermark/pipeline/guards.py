import os
from dataclasses import dataclass
from pathlib import Path

from media_watermark.config.settings import DEFAULT_MAX_SOURCE_BYTES
from media_watermark.imaging.base import BaseCompositor
from media_watermark.logging.logger import Log
from media_watermark.video.base import BaseTranscoder


class _Configured:
    """Marker default meaning "use the configured size limit"."""


CONFIGURED = _Configured()


@dataclass(frozen=True)
class Capabilities:
    """Tool availability, detected once per process and never re-checked."""

    image: bool
    video: bool

    @classmethod
    def detect(cls, compositor: BaseCompositor, transcoder: BaseTranscoder) -> "Capabilities":
        capabilities = cls(
            image=compositor.is_available(),
            video=transcoder.is_available(),
        )
        Log.info(
            f"capabilities detected: image={capabilities.image} video={capabilities.video}"
        )
        return capabilities


class Guards:
    """Cheap preconditions deciding whether a transform may run at all."""

    def __init__(
        self,
        capabilities: Capabilities,
        watermark_path: Path,
        max_source_bytes: int | None = DEFAULT_MAX_SOURCE_BYTES,
    ) -> None:
        self._capabilities = capabilities
        self.watermark_path = watermark_path
        self.max_source_bytes = max_source_bytes

    def can_run_image(self) -> bool:
        return self._capabilities.image

    def can_run_video(self) -> bool:
        return self._capabilities.video

    def watermark_present(self) -> bool:
        # Checked on every call: an operator may drop the asset in at runtime.
        return self.watermark_path.is_file()

    def size_ok(
        self,
        path: Path | None,
        threshold_bytes: int | None | _Configured = CONFIGURED,
    ) -> bool:
        """Return True if the file at ``path`` is within the size threshold.

        ``threshold_bytes`` defaults to the configured limit. A limit of None,
        configured or passed explicitly, disables the check. Missing or
        unreadable paths are never ok.
        """
        if path is None:
            return False
        try:
            size = path.stat().st_size
        except OSError:
            return False
        if not path.is_file() or not os.access(path, os.R_OK):
            return False
        limit = self.max_source_bytes if isinstance(threshold_bytes, _Configured) else threshold_bytes
        if limit is None:
            return True
        return size <= limit
