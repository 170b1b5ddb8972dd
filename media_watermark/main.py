import argparse
import shutil
import sys
from pathlib import Path

from media_watermark.config.settings import Settings
from media_watermark.interception.hooks import BeforeActionRegistry
from media_watermark.interception.interceptor import (
    CREATE_ACTION,
    InterceptionState,
    build_interceptor,
)
from media_watermark.logging.logger import Log
from media_watermark.upload.models import PathBackedSource, UploadHandle


def watermark_file(registry: BeforeActionRegistry, path: Path) -> Path | None:
    """Run one local file through the create-upload hooks.

    Returns the path of the watermarked copy written beside the source, or
    None when the upload would have been stored unchanged.
    """
    original = UploadHandle(source=PathBackedSource(path), original_filename=path.name)
    params = registry.run(CREATE_ACTION, {"file": original})
    processed = params["file"]
    if processed is original:
        return None
    destination = path.with_name(f"wm_{processed.original_filename}")
    shutil.copyfile(processed.source.existing_path(), destination)
    processed.discard()
    return destination


def main(argv: list[str] | None = None) -> int:
    """Entry point: configure logging -> detect tooling -> watermark each file."""
    parser = argparse.ArgumentParser(description="Watermark local images and videos.")
    parser.add_argument("files", nargs="+", type=Path)
    args = parser.parse_args(argv)

    # Invoked explicitly by an operator, so the global toggle is forced on.
    settings = Settings().model_copy(update={"media_watermark_enabled": True})
    Log.configure(settings.log_level)
    interceptor = build_interceptor(settings, settings_provider=lambda: settings)
    registry = BeforeActionRegistry()
    interceptor.install(registry)

    for path in args.files:
        if not path.is_file():
            Log.warning(f"{path} is not a file; skipping")
            continue
        destination = watermark_file(registry, path)
        if destination is None:
            Log.info(f"{path}: {InterceptionState.SKIPPED.value}")
        else:
            Log.info(f"{path}: watermarked copy written to {destination}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
