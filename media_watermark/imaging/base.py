from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any


class Gravity(str, Enum):
    NORTH_WEST = "NorthWest"
    NORTH_EAST = "NorthEast"
    SOUTH_WEST = "SouthWest"
    SOUTH_EAST = "SouthEast"


class BaseCompositor(ABC):
    """Contract for raster compositing adapters.

    Images are opaque engine objects; the transform only ever passes back what
    the adapter handed out.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the underlying library can be loaded. Never raises."""

    @abstractmethod
    def open(self, path: Path) -> Any:
        """Load an image from disk."""

    @abstractmethod
    def size(self, image: Any) -> tuple[int, int]:
        """Return (width, height) of a loaded image."""

    @abstractmethod
    def resize_to_width(self, image: Any, width: int) -> Any:
        """Return a copy scaled to ``width`` with the aspect ratio preserved."""

    @abstractmethod
    def composite(
        self,
        base: Any,
        overlay: Any,
        gravity: Gravity,
        offset: tuple[int, int],
    ) -> Any:
        """Return ``base`` with ``overlay`` drawn at the gravity corner.

        ``offset`` is (x, y) measured inward from the gravity corner.
        """

    @abstractmethod
    def write(self, image: Any, path: Path) -> None:
        """Encode ``image`` to ``path`` keeping the source image's format."""
