"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog

from .config.loader import ConfigLocator

_LOGGING_INITIALISED = False


def _default_log_dir() -> Path:
    return ConfigLocator().logs_dir


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger."""

    global _LOGGING_INITIALISED
    log_dir = _default_log_dir()
    error_log = log_dir / "error.log"
    export_log = log_dir / "export.log"

    if not _LOGGING_INITIALISED:
        log_dir.mkdir(parents=True, exist_ok=True)
        error_log.touch(exist_ok=True)
        export_log.touch(exist_ok=True)
        level = "DEBUG" if verbose else "INFO"
        # Console only carries warnings unless verbose; progress lines go through rich.
        console_level = "DEBUG" if verbose else "WARNING"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": console_level,
                        "formatter": "plain",
                    },
                    "export_file": {
                        "class": "logging.FileHandler",
                        "level": level,
                        "filename": str(export_log),
                        "encoding": "utf-8",
                        "formatter": "plain",
                    },
                    "error_file": {
                        "class": "logging.FileHandler",
                        "level": "ERROR",
                        "filename": str(error_log),
                        "encoding": "utf-8",
                        "formatter": "plain",
                    },
                },
                "loggers": {
                    "supplier_export": {
                        "handlers": ["console", "export_file", "error_file"],
                        "level": level,
                        "propagate": False,
                    },
                    "httpx": {
                        "handlers": ["export_file"],
                        "level": "WARNING",
                        "propagate": False,
                    },
                },
            }
        )

        # Forward structlog events into stdlib; JSON rendering stays at handler level.
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("supplier_export")


__all__ = ["configure_logging"]
