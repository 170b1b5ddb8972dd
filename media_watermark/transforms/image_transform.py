from pathlib import Path

from media_watermark.imaging.base import BaseCompositor, Gravity
from media_watermark.logging.logger import Log
from media_watermark.pipeline.exceptions import MaterializationError
from media_watermark.pipeline.guards import Guards
from media_watermark.transforms.base import BaseTransform, remove_quietly
from media_watermark.upload.materializer import SourceMaterializer
from media_watermark.upload.models import MediaKind, PathBackedSource, UploadHandle

SCALE_PERCENT = 10
PADDING = 20
DEFAULT_CONTENT_TYPE = "image/png"


def watermark_width(source_width: int) -> int:
    """10% of the source width, rounded half up."""
    return int(source_width * SCALE_PERCENT / 100.0 + 0.5)


class ImageTransform(BaseTransform):
    """Composites the watermark onto the bottom-left corner of a still image."""

    kind = MediaKind.IMAGE

    def __init__(
        self,
        guards: Guards,
        materializer: SourceMaterializer,
        compositor: BaseCompositor,
    ) -> None:
        super().__init__(guards, materializer)
        self._compositor = compositor

    def _capability_available(self) -> bool:
        return self._guards.can_run_image()

    def _apply(self, handle: UploadHandle, source: Path) -> UploadHandle:
        image = self._compositor.open(source)
        # The watermark comes from the asset path, never from the upload.
        watermark = self._compositor.open(self._guards.watermark_path)

        source_width, _ = self._compositor.size(image)
        watermark = self._compositor.resize_to_width(watermark, watermark_width(source_width))
        result = self._compositor.composite(image, watermark, Gravity.SOUTH_WEST, (PADDING, PADDING))

        output = self._allocate_output("watermarked_", handle.extension or source.suffix)
        try:
            self._compositor.write(result, output)
            if output.stat().st_size == 0:
                raise MaterializationError(f"compositor wrote an empty file to {output}")
        except Exception:
            remove_quietly(output)
            raise

        Log.debug(f"composited watermark onto {handle.original_filename!r}")
        return UploadHandle(
            source=PathBackedSource(output, owned=True),
            original_filename=handle.original_filename or output.name,
            content_type=handle.content_type or DEFAULT_CONTENT_TYPE,
        )
