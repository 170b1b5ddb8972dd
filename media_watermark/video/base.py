from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProcessOutcome:
    """Captured result of one external transcoder run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class BaseTranscoder(ABC):
    """Contract for video overlay adapters."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the transcoder can be invoked. Never raises."""

    @abstractmethod
    def watermark(self, source: Path, watermark: Path, output: Path) -> ProcessOutcome:
        """Overlay ``watermark`` onto every frame of ``source`` into ``output``.

        Blocks until the external process exits; no timeout is applied.
        """
