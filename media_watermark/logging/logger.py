import logging
import sys
import traceback

LOG_PREFIX = "[media_watermark]"
TRACE_LIMIT = 10


class Log:
    """Centralized logging; every line carries the fixed watermark prefix."""

    _logger: logging.Logger = logging.getLogger("media_watermark")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(f"{LOG_PREFIX} {message}", extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(f"{LOG_PREFIX} {message}", extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(f"{LOG_PREFIX} {message}", extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(f"{LOG_PREFIX} {message}", extra=kwargs)

    @classmethod
    def failure(cls, message: str, exc: BaseException, **kwargs: object) -> None:
        """Log an error with exception class, message and a bounded stack excerpt."""
        frames = traceback.format_tb(exc.__traceback__, limit=TRACE_LIMIT)
        excerpt = "".join(frames).rstrip()
        cls.error(f"{message}: {type(exc).__name__} {exc}\n{excerpt}", **kwargs)
