"""
Structured Logging Configuration
JSON logs in production, colourised console in development
"""
import sys
import logging
from typing import Optional

from loguru import logger

from .config import Settings, settings as default_settings


HUMAN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
PLAIN_FORMAT = "{time} | {level} | {name}:{function}:{line} | {message}"

# stdlib loggers routed through loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "sqlalchemy.engine", "slowapi")


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _use_json(config: Settings) -> bool:
    return config.LOG_JSON_FORMAT and config.ENVIRONMENT == "production"


def configure_logging(config: Optional[Settings] = None) -> None:
    """Replace loguru's default sink with console (and optional file) sinks"""
    config = config or default_settings
    logger.remove()

    if _use_json(config):
        logger.add(sys.stdout, format=PLAIN_FORMAT, level=config.LOG_LEVEL, serialize=True)
    else:
        logger.add(sys.stdout, format=HUMAN_FORMAT, level=config.LOG_LEVEL, colorize=True)

    if config.LOG_FILE:
        logger.add(
            config.LOG_FILE,
            rotation="00:00",
            retention="30 days",
            level=config.LOG_LEVEL,
            format=PLAIN_FORMAT,
            serialize=config.LOG_JSON_FORMAT,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        logging.getLogger(name).handlers = [InterceptHandler()]

    logger.info(f"Logging configured: level={config.LOG_LEVEL}, json={_use_json(config)}")
