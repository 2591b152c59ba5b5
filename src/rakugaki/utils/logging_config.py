# src/rakugaki/utils/logging_config.py
"""
Centralized logging configuration for Rakugaki Gallery.

Usage:
    from rakugaki.utils.logging_config import configure_logging, set_trace_id

    configure_logging()          # once, at API startup
    set_trace_id()               # per request (done by the API middleware)

Every record, from stdlib ``logging`` and from ``loguru``, carries the
current request's trace id.

Configuration via environment variables:
    RAKUGAKI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    RAKUGAKI_LOG_DIR: Base directory for log files (default: logs/)
    RAKUGAKI_LOG_MAX_BYTES: Max size per log file in bytes (default: 10MB)
    RAKUGAKI_LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger as loguru_logger

# Context variable for trace_id (thread-safe, async-safe)
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(trace_id)s] %(name)s:%(lineno)d - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Config file in the same directory as this module
LOG_CONFIG_FILE = Path(__file__).parent / "log_config.yaml"

_DEFAULT_FILES = {
    "app": "rakugaki.log",
    "error": "errors/error.log",
}

_configured = False
_handlers: list[logging.Handler] = []


class LogFiles:
    """
    Log file paths loaded from src/rakugaki/utils/log_config.yaml.

    To add a new log file, add an entry under the ``files`` section and look
    it up with ``LogFiles.get("name")``.
    """

    _files: Optional[dict] = None

    @classmethod
    def _load(cls, config_path: Path = LOG_CONFIG_FILE) -> dict:
        files = dict(_DEFAULT_FILES)
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            files.update(config.get("files") or {})
        return files

    @classmethod
    def get(cls, name: str) -> str:
        if cls._files is None:
            cls._files = cls._load()
        key = name.lower()
        if key in cls._files:
            return cls._files[key]
        return f"{key}/{key}.log"

    @classmethod
    def reload(cls, config_path: Path = LOG_CONFIG_FILE) -> None:
        cls._files = cls._load(config_path)


class TraceIdFilter(logging.Filter):
    """Stamp ``record.trace_id`` from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = _trace_id_var.get() or "-"
        return True


def _get_config() -> dict:
    """Get logging configuration from environment variables."""
    return {
        "level": os.environ.get("RAKUGAKI_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        "base_dir": os.environ.get("RAKUGAKI_LOG_DIR", DEFAULT_LOG_DIR),
        "max_bytes": int(os.environ.get("RAKUGAKI_LOG_MAX_BYTES", DEFAULT_MAX_BYTES)),
        "backup_count": int(os.environ.get("RAKUGAKI_LOG_BACKUP_COUNT", DEFAULT_BACKUP_COUNT)),
    }


def _file_handler(path: Path, config: dict, level: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=config["max_bytes"],
        backupCount=config["backup_count"],
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


class _PropagateHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


def configure_logging(
    level: Optional[str] = None,
    base_dir: Optional[str] = None,
    *,
    to_files: bool = True,
) -> None:
    """
    Install console and rotating-file handlers on the root logger and route
    loguru through the same trace-id aware format. Safe to call repeatedly.
    """
    global _configured

    config = _get_config()
    if level:
        config["level"] = level.upper()
    if base_dir:
        config["base_dir"] = base_dir

    numeric_level = logging.getLevelName(config["level"])
    if not isinstance(numeric_level, int):
        raise ValueError(f"RAKUGAKI_LOG_LEVEL is not a valid level: {config['level']!r}")

    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    _handlers.append(console)

    if to_files:
        base = Path(config["base_dir"])
        _handlers.append(_file_handler(base / LogFiles.get("app"), config, numeric_level))
        _handlers.append(_file_handler(base / LogFiles.get("error"), config, logging.ERROR))

    for handler in _handlers:
        handler.setFormatter(formatter)
        handler.addFilter(TraceIdFilter())
        root.addHandler(handler)
    root.setLevel(numeric_level)

    # loguru records are re-emitted through the stdlib handlers above.
    loguru_logger.remove()
    loguru_logger.add(_PropagateHandler(), level=config["level"], format="{message}")

    _configured = True


def is_configured() -> bool:
    return _configured


# ============================================================================
# Trace ID Management
# ============================================================================

def generate_trace_id() -> str:
    """Generate a new trace ID."""
    return f"req-{uuid.uuid4().hex[:12]}"


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """
    Set the trace ID for the current context.

    If no trace_id is provided, generates a new one.
    Returns the trace_id that was set.
    """
    tid = trace_id or generate_trace_id()
    _trace_id_var.set(tid)
    return tid


def get_trace_id() -> Optional[str]:
    """Get the current trace ID."""
    return _trace_id_var.get()


def clear_trace_id() -> None:
    """Clear the current trace ID."""
    _trace_id_var.set(None)
