"""Logging setup for fsagent.

The chat owns stdout, so diagnostics go to stderr and stay quiet (WARNING) unless
LOG_LEVEL asks for more.
"""

import logging
import os
import sys

from pydantic import BaseModel


class LogConfig(BaseModel):
    """Root logger settings, built from Settings.log_level by the CLI."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger for an fsagent session.

    Replaces any handlers installed earlier so repeated calls do not duplicate
    output. SDK and HTTP client chatter is held at WARNING regardless of the
    requested level; request bodies would otherwise flood the terminal.
    """
    if config is None:
        config = LogConfig()

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stderr,
        force=True,
    )

    for noisy in ("anthropic", "openai", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Return the module logger used across tools, clients and the agent loop.

    Args:
        name: Module name (typically __name__)
        level: Explicit level, overriding LOG_LEVEL

    Returns:
        Logger that inherits the root configuration unless a level is forced
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL")
    if log_level:
        logger.setLevel(log_level.upper())

    return logger
