"""
Logging configuration for the ThreadNote backend.

Every module logs under the ``threadnote`` namespace. ``setup_logging`` gives
each layer its own level: note operations are reported at INFO by the
services, storage code only speaks up on failures and the HTTP layer logs one
line per request. Setting ``LOG_LEVEL=DEBUG`` opens all of them.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import Settings, get_settings

# default level per layer; the configured LOG_LEVEL can only raise these
PACKAGE_LEVELS: Dict[str, int] = {
    "threadnote.services": logging.INFO,
    "threadnote.repositories": logging.WARNING,
    "threadnote.api": logging.INFO,
    "threadnote.security": logging.WARNING,
    "threadnote.http": logging.INFO,
}

# extra fields promoted to the top level of JSON records
CONTEXT_FIELDS = ("request_id", "note_id", "author_id", "status_code", "duration_ms")

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# requests that are logged at DEBUG only
QUIET_PATHS = frozenset(("/health", "/api/health/", "/api/health/database"))


class NoteLogFormatter(logging.Formatter):
    """One JSON object per record, with note and request context lifted out."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        for field in CONTEXT_FIELDS:
            if field in extra:
                entry[field] = extra.pop(field)
        if extra:
            entry["extra"] = extra
        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = record.exc_info[0].__name__
            entry["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def parse_level(name: Optional[str]) -> int:
    """Level number for a level name; unknown names fall back to INFO."""
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def package_level(default: int, configured: int) -> int:
    if configured == logging.DEBUG:
        return logging.DEBUG
    return max(default, configured)


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """dictConfig for the app: console always, rotating files when log_dir is set."""
    configured = parse_level(settings.log_level)
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain" if settings.debug else "json",
            "stream": sys.stdout,
        },
    }
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["notes_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_dir / "threadnote.log"),
            "maxBytes": 10_000_000,
            "backupCount": 5,
            "formatter": "json",
        }
        handlers["errors_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_dir / "errors.log"),
            "maxBytes": 10_000_000,
            "backupCount": 5,
            "formatter": "json",
            "level": "ERROR",
        }

    loggers: Dict[str, Dict[str, Any]] = {
        "threadnote": {
            "handlers": list(handlers),
            "level": configured,
            "propagate": False,
        },
        "sqlalchemy.engine": {"level": "WARNING"},
        "alembic": {"level": "INFO"},
    }
    for name, default in PACKAGE_LEVELS.items():
        loggers[name] = {"level": package_level(default, configured)}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": NoteLogFormatter},
            "plain": {
                "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
    get_logger("main").debug(
        "Logging configured",
        extra={"log_level": settings.log_level, "environment": settings.environment},
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the threadnote namespace."""
    return logging.getLogger(f"threadnote.{name}")


class LoggingMiddleware:
    """ASGI middleware: one log line per request, tagged with a request id.

    The id is echoed back in the ``X-Request-ID`` response header so a client
    report can be matched to the server log.
    """

    header = b"x-request-id"

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = uuid.uuid4().hex[:12]
        started = time.perf_counter()
        status_code = 0
        level = logging.DEBUG if scope["path"] in QUIET_PATHS else logging.INFO

        async def send_with_id(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                headers.append((self.header, request_id.encode()))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        except Exception:
            self.logger.exception(
                f"{scope['method']} {scope['path']} failed",
                extra={"request_id": request_id, "duration_ms": _elapsed_ms(started)},
            )
            raise

        self.logger.log(
            level,
            f"{scope['method']} {scope['path']} -> {status_code}",
            extra={
                "request_id": request_id,
                "status_code": status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
