"""Logging setup shared by the API process and queue workers."""

import logging

from hiresync.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure root logging once per process.

    Logs go to stderr, and additionally to ``log_file`` when one is
    configured (production deployments keep a dedicated sync log).
    """
    level_name = (level or settings.log_level).upper()
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    path = log_file or settings.log_file
    if path:
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
