"""Logging helpers for rift."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import Optional, Union

MAX_BYTES = 5 * 1024 * 1024  # 5 MB per log segment
BACKUP_COUNT = 3
FALLBACK_ROOT = Path("~/.cache/rift").expanduser()
LOGGER_NAME = "rift"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(
    level: Union[str, int] = logging.WARNING,
    log_file: Optional[Path] = None,
    structured: bool = False,
) -> Optional[Path]:
    """Configure the ``rift`` logger.

    Args:
        level: Logging level (string name or int constant).
        log_file: Optional path of a rotating text log.
        structured: Write JSON lines next to ``log_file`` (``.jsonl`` suffix).

    Returns:
        Path to the text log file actually used, or None when only the
        console handler is attached.
    """

    resolved_level = _resolve_level(level)
    text_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger = logging.getLogger(LOGGER_NAME)
    _reset_handlers(logger)
    logger.setLevel(resolved_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    log_path: Optional[Path] = None
    if log_file is not None:
        log_path = _resolve_log_path(Path(log_file).expanduser())
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(text_formatter)
        logger.addHandler(file_handler)

        if structured:
            json_handler = RotatingFileHandler(
                log_path.with_suffix(".jsonl"),
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            json_handler.setFormatter(JSONFormatter())
            logger.addHandler(json_handler)

    logger.propagate = False
    return log_path


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return int(level)


def _resolve_log_path(requested: Path) -> Path:
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        return requested
    except PermissionError:
        fallback = FALLBACK_ROOT / requested.name
        fallback.parent.mkdir(parents=True, exist_ok=True)
        print(
            f"[logging] Unable to write logs under '{requested.parent}'; "
            f"falling back to '{fallback.parent}'.",
            file=sys.stderr,
        )
        return fallback


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["setup_logging", "JSONFormatter", "FALLBACK_ROOT", "LOGGER_NAME"]
