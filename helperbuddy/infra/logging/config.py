"""Logging configuration setup.

Records flow: logger -> QueueHandler on root (context filter runs here, in
the emitting task) -> queue -> QueueListener thread -> console/file handlers.
Handlers doing I/O therefore never block the event loop.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from helperbuddy.infra.logging.context import ContextInjectingFilter
from helperbuddy.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from helperbuddy.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_configured = False


def shutdown() -> None:
    """Flush and detach the queue listener. Safe to call repeatedly."""
    global _listener, _queue_handler

    if _listener is not None:
        _listener.stop()
        _listener = None
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging once per process.

    Args:
        log_settings: Settings to apply; loaded from the environment when omitted.
        force: Reconfigure even if logging was already set up.
        **overrides: Keyword overrides for configure_logging().
    """
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from helperbuddy.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    *,
    json_logs: bool = True,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    capture_warnings: bool = True,
    service_name: str = "helperbuddy",
) -> None:
    """Install the queue-based handler chain on the root logger.

    Example:
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    shutdown()
    logging.captureWarnings(capture_warnings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
            # Chatty third-party loggers
            "loggers": {
                "apscheduler": {"level": "WARNING"},
                "aiosqlite": {"level": "WARNING"},
                "httpx": {"level": "WARNING"},
            },
        }
    )

    formatter: logging.Formatter = (
        JSONFormatter(static={"service": service_name})
        if json_logs
        else logging.Formatter(_TEXT_FORMAT)
    )

    handlers: list[logging.Handler] = []
    if console_enabled:
        handlers.append(logging.StreamHandler())
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=file_max_bytes,
                backupCount=file_backup_count,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    _start_queue_listener(handlers, include_context=include_context)


def _start_queue_listener(handlers: list[logging.Handler], *, include_context: bool) -> None:
    global _listener, _queue_handler

    if not handlers:
        return

    queue: Queue[logging.LogRecord] = Queue()
    _listener = QueueListener(queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    _queue_handler = QueueHandler(queue)
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)


__all__ = ["configure_logging", "setup_logging", "shutdown"]
