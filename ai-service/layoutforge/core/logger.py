"""
Loguru sink configuration.

Structured events from ``layoutforge.utils.logging`` and the stdlib records
emitted by the generative backend layer (``layoutforge.llm``, ``openai``,
``httpx``) all end up in the sinks configured here.
"""
import logging
import sys
from pathlib import Path
from loguru import logger

from layoutforge.config import settings

# stdlib loggers routed into loguru
BRIDGED_LOGGERS = ("layoutforge.llm", "openai", "httpx", "uvicorn", "uvicorn.error")

CONSOLE_FORMAT_DEV = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

CONSOLE_FORMAT_PROD = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}"


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping level and caller"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _bridge_stdlib_logging() -> None:
    handler = InterceptHandler()
    for name in BRIDGED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False
    # Backend client chatter stays at WARNING unless debugging
    logging.getLogger("openai").setLevel(logging.DEBUG if settings.debug else logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.INFO if settings.debug else logging.WARNING)
    logging.getLogger("layoutforge.llm").setLevel(settings.log_level)


def setup_logging() -> None:
    """
    Configure loguru once per process.

    Debug: colourised console with caller info.
    Otherwise: plain console for container logs, a rotated service log and a
    separate error log.
    """
    logger.remove()

    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT_DEV if settings.debug else CONSOLE_FORMAT_PROD,
        level=settings.log_level,
        colorize=settings.debug,
        backtrace=settings.debug,
        diagnose=settings.debug,
    )

    if not settings.debug:
        log_dir = Path(settings.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "layoutforge.log",
            format=CONSOLE_FORMAT_PROD,
            level="INFO",
            rotation="500 MB",
            retention="10 days",
            compression="zip",
            enqueue=True,
        )
        logger.add(
            log_dir / "layoutforge.errors.log",
            format=CONSOLE_FORMAT_PROD,
            level="ERROR",
            rotation="50 MB",
            retention="30 days",
            enqueue=True,
        )

    _bridge_stdlib_logging()

    logger.info(
        f"Logging configured - level={settings.log_level} debug={settings.debug} "
        f"environment={settings.environment}"
    )
