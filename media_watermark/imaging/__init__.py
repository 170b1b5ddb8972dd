from media_watermark.imaging.base import BaseCompositor, Gravity
from media_watermark.imaging.pillow_adapter import PillowCompositor

__all__ = ["BaseCompositor", "Gravity", "PillowCompositor"]
