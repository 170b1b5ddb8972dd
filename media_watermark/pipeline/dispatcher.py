from media_watermark.config.settings import Settings
from media_watermark.logging.logger import Log
from media_watermark.transforms.base import BaseTransform
from media_watermark.transforms.video_transform import is_processed
from media_watermark.upload.models import MediaKind, UploadHandle


class Dispatcher:
    """Routes a classified upload to the transform for its media kind."""

    def __init__(self, image_transform: BaseTransform, video_transform: BaseTransform) -> None:
        self._transforms: dict[MediaKind, BaseTransform] = {
            MediaKind.IMAGE: image_transform,
            MediaKind.VIDEO: video_transform,
        }

    def dispatch(
        self,
        handle: UploadHandle,
        kind: MediaKind | None,
        settings: Settings,
    ) -> UploadHandle | None:
        if kind is None:
            Log.debug("not image/video; nothing to dispatch")
            return None
        if not self._enabled(kind, settings):
            Log.debug(f"{kind.value} watermarking disabled")
            return None

        if kind is MediaKind.VIDEO and is_processed(handle.name):
            Log.debug("detected already-processed video; skipping")
            return None

        Log.debug(f"dispatched {kind.value} upload to its transform")
        processed = self._transforms[kind].process(handle)
        if processed is None:
            Log.debug(f"{kind.value} processor skipped or failed")
        return processed

    def _enabled(self, kind: MediaKind, settings: Settings) -> bool:
        if kind is MediaKind.IMAGE:
            return settings.media_watermark_image_enabled
        return settings.media_watermark_video_enabled
