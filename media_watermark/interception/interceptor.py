from collections.abc import Callable
from enum import Enum

from media_watermark.config.settings import Settings
from media_watermark.imaging.pillow_adapter import PillowCompositor
from media_watermark.interception.hooks import BeforeActionRegistry, Params
from media_watermark.logging.logger import Log
from media_watermark.pipeline.classifier import Classifier
from media_watermark.pipeline.dispatcher import Dispatcher
from media_watermark.pipeline.guards import Capabilities, Guards
from media_watermark.transforms.image_transform import ImageTransform
from media_watermark.transforms.video_transform import VideoTransform
from media_watermark.upload.materializer import SourceMaterializer
from media_watermark.upload.models import UploadHandle
from media_watermark.video.ffmpeg_adapter import FfmpegTranscoder

PRIMARY_PARAM = "file"
UPLOAD_PARAMS = ("file", "upload", "qqfile", "attachment")
CREATE_ACTION = "create"


class InterceptionState(str, Enum):
    DISABLED = "disabled"
    NO_CANDIDATE = "no_candidate"
    CLASSIFYING = "classifying"
    DISPATCHED = "dispatched"
    SUBSTITUTED = "substituted"
    SKIPPED = "skipped"


class UploadInterceptor:
    """Swaps an incoming upload for its watermarked version before it is stored.

    The original request always proceeds: any failure leaves ``params`` as they
    were and reports SKIPPED.
    """

    def __init__(
        self,
        classifier: Classifier,
        dispatcher: Dispatcher,
        settings_provider: Callable[[], Settings] = Settings,
    ) -> None:
        self._classifier = classifier
        self._dispatcher = dispatcher
        self._settings_provider = settings_provider

    def install(self, registry: BeforeActionRegistry) -> bool:
        return registry.register(CREATE_ACTION, self.before_create)

    def before_create(self, params: Params) -> InterceptionState:
        try:
            return self._intercept(params)
        except Exception as exc:
            Log.failure("unexpected error in upload interception", exc)
            return InterceptionState.SKIPPED

    def _intercept(self, params: Params) -> InterceptionState:
        # Settings are re-read per request so toggles apply without a restart.
        settings = self._settings_provider()
        if not settings.media_watermark_enabled:
            Log.debug("globally disabled via media_watermark_enabled")
            return InterceptionState.DISABLED

        incoming = self._find_candidate(params)
        if incoming is None:
            return InterceptionState.NO_CANDIDATE

        Log.debug(f"state {InterceptionState.CLASSIFYING.value}")
        kind = self._classifier.classify(incoming)
        if kind is None:
            Log.debug(
                f"not image/video: {self._classifier.resolve_content_type(incoming)}"
            )
            return InterceptionState.SKIPPED

        processed = self._dispatcher.dispatch(incoming, kind, settings)
        if processed is None:
            return InterceptionState.SKIPPED

        self._substitute(params, processed)
        Log.info(f"replaced {kind.value} upload with watermarked version")
        return InterceptionState.SUBSTITUTED

    def _find_candidate(self, params: Params) -> UploadHandle | None:
        for name in UPLOAD_PARAMS:
            value = params.get(name)
            if value:
                return value if isinstance(value, UploadHandle) else None
        return None

    def _substitute(self, params: Params, processed: UploadHandle) -> None:
        params[PRIMARY_PARAM] = processed
        for name in UPLOAD_PARAMS:
            if name != PRIMARY_PARAM:
                params.pop(name, None)


def build_interceptor(
    settings: Settings,
    settings_provider: Callable[[], Settings] = Settings,
) -> UploadInterceptor:
    """Build an UploadInterceptor with capabilities detected once, up front."""
    compositor = PillowCompositor()
    transcoder = FfmpegTranscoder(settings.ffmpeg_binary)
    capabilities = Capabilities.detect(compositor, transcoder)
    guards = Guards(
        capabilities,
        watermark_path=settings.watermark_asset_path,
        max_source_bytes=settings.max_source_bytes,
    )
    materializer = SourceMaterializer(temp_dir=settings.temp_dir)
    dispatcher = Dispatcher(
        image_transform=ImageTransform(guards, materializer, compositor),
        video_transform=VideoTransform(guards, materializer, transcoder),
    )
    return UploadInterceptor(Classifier(), dispatcher, settings_provider)
