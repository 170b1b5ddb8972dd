class WatermarkError(Exception):
    """Base exception for all watermarking pipeline errors."""


class SkipError(WatermarkError):
    """A guard declined the upload; skipped silently."""


class CapabilityUnavailableError(SkipError):
    """Raised when the compositing library or transcoder binary is missing."""


class AssetMissingError(SkipError):
    """Raised when the watermark asset file is absent."""


class SourceTooLargeError(SkipError):
    """Raised when the upload exceeds the size threshold or cannot be sized."""


class MaterializationError(WatermarkError):
    """Raised when an upload's bytes cannot be written to or read from disk."""


class ExternalProcessError(WatermarkError):
    """Raised when the transcoder fails or produces empty output."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
