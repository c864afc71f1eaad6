"""
Structured logging for the catalog API and the CLI.

Loggers accept keyword context (``logger.info("Catalog loaded",
company_slug="acme", products=12)``). In production each record is one JSON
line; elsewhere it is a coloured single line with ``key=value`` context.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

CONTEXT_ATTR = "context"

# Libraries whose INFO chatter would drown the catalog logs
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, CONTEXT_ATTR, None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, context under ``data``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _context(record)
        if context:
            log_data["data"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured level, logger name, message and context on one line."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")
        line = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}: {record.getMessage()}"

        context = _context(record)
        if context:
            line += " (" + " | ".join(f"{k}={v}" for k, v in context.items()) + ")"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context."""

    def _log_context(self, level: int, msg: str, args: tuple, exc_info: Any = None, **context: Any) -> None:
        if not self.isEnabledFor(level):
            return
        self._log(level, msg, args, exc_info=exc_info, extra={CONTEXT_ATTR: context})

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.DEBUG, msg, args, **context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.INFO, msg, args, **context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.WARNING, msg, args, **context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.ERROR, msg, args, **context)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Install a single stdout handler on the root logger.

    DEBUG when ``settings.debug`` is set, INFO otherwise. JSON output in
    production. Called from the app lifespan.
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if settings.environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Logger for a module.

    Usage:
        logger = get_logger(__name__)
        logger.warning("Slug query failed", property="Slug", error=str(e))
    """
    return logging.getLogger(name)  # type: ignore


def mask_secret(secret: str | None) -> str:
    """First two characters and the length, e.g. ``"cl***(9)"``."""
    if not secret:
        return "<empty>"
    if len(secret) <= 2:
        return f"***({len(secret)})"
    return f"{secret[:2]}***({len(secret)})"
