from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_SOURCE_BYTES = 10 * 1024 * 1024


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    media_watermark_enabled: bool = False
    media_watermark_image_enabled: bool = True
    media_watermark_video_enabled: bool = True

    watermark_asset_path: Path = Path("assets/images/watermark.png")
    max_source_bytes: int | None = DEFAULT_MAX_SOURCE_BYTES

    ffmpeg_binary: str = "ffmpeg"
    temp_dir: Path | None = None
