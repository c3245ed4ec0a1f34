from __future__ import annotations

"""
Logging Configuration Models.

Settings for the CLI's logging bootstrap. Besides destinations and formats,
the model lists third-party loggers (the HTTP stack underneath the transport)
that are held at a higher threshold so '--debug' shows operation polling
rather than connection pool chatter.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Loggers emitted by requests' connection layer
HTTP_STACK_LOGGERS: Tuple[str, ...] = ("urllib3", "requests")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable logging settings for one CLI run.

    Attributes:
        level: Minimum severity for rblxsync records.
        console: Write records to stderr (stdout carries pulled sources).
        log_file: Optional path of a rotating diagnostic log.
        max_bytes: Size of a log segment before rotation.
        backup_count: Rotated segments kept on disk.
        quiet_loggers: Third-party loggers capped at quiet_level.
        quiet_level: Threshold applied to quiet_loggers.
        console_fmt: Format of stderr records.
        file_fmt: Format of file records.
        datefmt: Timestamp format of file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 2

    quiet_loggers: Tuple[str, ...] = HTTP_STACK_LOGGERS
    quiet_level: str = "WARNING"

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
