import shutil
import subprocess
from pathlib import Path

from media_watermark.logging.logger import Log
from media_watermark.video.base import BaseTranscoder, ProcessOutcome

SCALE_RATIO = 0.10
OFFSET_X = 10
OFFSET_Y = 10

FILTER_COMPLEX = (
    f"[1][0]scale2ref=w=main_w*{SCALE_RATIO:.2f}:h=ow/dar[wm][vid];"
    f"[vid][wm]overlay={OFFSET_X}:main_h-overlay_h-{OFFSET_Y}[outv]"
)


class FfmpegTranscoder(BaseTranscoder):
    """Overlays the watermark with an ffmpeg filter graph."""

    def __init__(self, binary: str = "ffmpeg") -> None:
        self._binary = binary

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def build_command(self, source: Path, watermark: Path, output: Path) -> list[str]:
        return [
            self._binary,
            "-y",
            "-hide_banner",
            "-loglevel", "error",
            "-i", str(source),
            "-i", str(watermark),
            "-filter_complex", FILTER_COMPLEX,
            "-map", "[outv]",
            "-map", "0:a?",
            "-c:v", "libx264",
            "-preset", "veryfast",
            "-crf", "23",
            "-c:a", "copy",
            str(output),
        ]

    def watermark(self, source: Path, watermark: Path, output: Path) -> ProcessOutcome:
        cmd = self.build_command(source, watermark, output)
        Log.info(f"running ffmpeg on {source}")
        completed = subprocess.run(cmd, capture_output=True, check=False)
        return ProcessOutcome(
            returncode=completed.returncode,
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
