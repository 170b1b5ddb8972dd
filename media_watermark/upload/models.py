import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO

SPOOL_MAX_BYTES = 1024 * 1024


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class ByteSource(ABC):
    """Where the bytes of an upload live."""

    @abstractmethod
    def existing_path(self) -> Path | None:
        """Return a filesystem path already holding the bytes, if there is one."""

    @abstractmethod
    def open(self) -> BinaryIO:
        """Return a binary stream positioned at the start of the bytes.

        The caller must not close streams it did not open itself; use
        ``release`` with the returned stream when done.
        """

    def release(self, stream: BinaryIO) -> None:
        stream.close()


class PathBackedSource(ByteSource):
    """Bytes stored in a file on disk.

    When ``owned`` is true the file belongs to the handle and ``discard``
    removes it.
    """

    def __init__(self, path: Path | str, owned: bool = False) -> None:
        self.path = Path(path)
        self.owned = owned

    def existing_path(self) -> Path | None:
        return self.path if self.path.is_file() else None

    def open(self) -> BinaryIO:
        return self.path.open("rb")

    def discard(self) -> None:
        if self.owned:
            self.path.unlink(missing_ok=True)


class StreamBackedSource(ByteSource):
    """Bytes only reachable through an in-memory or socket-like stream."""

    def __init__(self, stream: BinaryIO) -> None:
        if not stream.seekable():
            # Buffer once so every reader, the host included, can start over.
            spooled = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_BYTES)
            shutil.copyfileobj(stream, spooled)
            spooled.seek(0)
            stream = spooled  # type: ignore[assignment]
        self.stream = stream
        self._start = stream.tell()

    def existing_path(self) -> Path | None:
        return None

    def open(self) -> BinaryIO:
        self.stream.seek(self._start)
        return self.stream

    def release(self, stream: BinaryIO) -> None:
        # Rewind so the host can still read the original upload.
        stream.seek(self._start)


@dataclass(frozen=True)
class UploadHandle:
    """An in-flight upload: its bytes, original filename and declared type."""

    source: ByteSource
    original_filename: str | None = None
    content_type: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def extension(self) -> str:
        """Lowercased extension of the original filename ('' when absent)."""
        return os.path.splitext(self.original_filename or "")[1].lower()

    @property
    def name(self) -> str | None:
        """Original filename, else the basename of the backing file."""
        if self.original_filename:
            return self.original_filename
        path = self.source.existing_path()
        return path.name if path is not None else None

    def read_bytes(self) -> bytes:
        stream = self.source.open()
        try:
            return stream.read()
        finally:
            self.source.release(stream)

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    def discard(self) -> None:
        """Remove the handle's own temp file, if it owns one."""
        if isinstance(self.source, PathBackedSource):
            self.source.discard()
