"""Logging setup for the chat proxy.

Loguru is the single logging backend: ``setup_logging`` installs a
console sink, an optional rotating file sink, and routes records from
the standard ``logging`` module (uvicorn, httpx) into Loguru so the
output is uniform.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

from ..config.app_config import AppConfig, get_app_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Forward standard logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except (KeyError, ValueError):
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(app_config: AppConfig | None = None) -> None:
    """Configure Loguru sinks from the application settings.

    Safe to call more than once; existing sinks are removed first so
    repeated app creation (as in tests) does not duplicate output.
    """
    app_config = app_config or get_app_config()

    logger.remove()

    logger.add(
        sys.stdout,
        level=app_config.log_level,
        format=LOG_FORMAT,
        colorize=True,
        backtrace=app_config.app_debug,
        diagnose=app_config.app_debug,
    )

    if app_config.log_file:
        Path(app_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            app_config.log_file,
            level=app_config.log_level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=app_config.app_debug,
            diagnose=app_config.app_debug,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.WARNING, force=True)

    logger.debug("Logging configured (env={}, level={})", app_config.app_env, app_config.log_level)
