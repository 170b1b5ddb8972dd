from media_watermark.upload.models import MediaKind, UploadHandle

EXTENSION_CONTENT_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class Classifier:
    """Works out what kind of media an upload carries."""

    def resolve_content_type(self, handle: UploadHandle) -> str | None:
        """Declared type, then the Content-Type header, then the extension table."""
        for candidate in (handle.content_type, handle.header("Content-Type")):
            if candidate and candidate.strip():
                return candidate.strip()
        return EXTENSION_CONTENT_TYPES.get(handle.extension)

    def classify(self, handle: UploadHandle) -> MediaKind | None:
        content_type = self.resolve_content_type(handle)
        if content_type is None:
            return None
        for kind in MediaKind:
            if content_type.lower().startswith(kind.value):
                return kind
        return None
