"""Process-wide logging setup for the aggregator."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from studyspace.utils.config import get_settings


_LOGGER_INITIALIZED = False
# HTTP client libraries behind the feed source and the test client.
_HTTP_CLIENT_LOGGERS = ("urllib3", "requests", "httpx", "httpcore")


def http_client_level(app_level: str) -> int:
    """Level for HTTP client loggers: only surfaced when debugging feeds."""
    if app_level.upper() == "DEBUG":
        return logging.DEBUG
    return logging.WARNING


def log_format(app_name: str) -> str:
    return f"%(asctime)s | %(levelname)s | {app_name} | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once, from ``Settings`` unless ``level`` is given."""

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    settings = get_settings()
    resolved_level = (level or settings.log_level).upper()

    logging.basicConfig(
        level=resolved_level,
        format=log_format(settings.app_name),
        stream=sys.stdout,
    )
    client_level = http_client_level(resolved_level)
    for name in _HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
