"""Loguru setup for the API server and the terminal client.

Console output goes to stderr so that it never interleaves with the chat
transcript the client prints on stdout.  Records emitted through the
standard ``logging`` module (uvicorn, httpx, openai) are forwarded to
Loguru so everything shares one format.
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


class LoguruHandler(logging.Handler):
    """Handler to forward standard logging records to Loguru."""

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

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(app_config: AppConfig | None = None, level: str | None = None) -> "loguru.Logger":
    """Configure the global Loguru logger.

    Safe to call repeatedly: existing sinks are removed before new ones are
    added, and the stdlib bridge is installed with ``force=True``.

    Parameters
    ----------
    app_config: AppConfig, optional
        Settings providing the log level, optional log file and debug flag.
        Loaded from the environment when omitted.
    level: str, optional
        Overrides ``app_config.log_level`` (used by the CLI ``--verbose``
        switch).
    """
    app_config = app_config or get_app_config()
    level = (level or app_config.log_level).upper()

    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=LOG_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=app_config.app_debug,
    )

    if app_config.log_file:
        Path(app_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            app_config.log_file,
            level=level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=app_config.app_debug,
        )

    logging.basicConfig(handlers=[LoguruHandler()], level=logging.WARNING, force=True)

    logger.debug("Logging configured (env={}, level={})", app_config.app_env, level)
    return logger
