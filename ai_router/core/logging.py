import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

NOISY_HTTP_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_factory_lock = threading.Lock()
_factory_installed = False


def _install_record_factory() -> None:
    """Wrap the current LogRecordFactory once so records carry the correlation ID."""
    global _factory_installed
    with _factory_lock:
        if _factory_installed:
            return
        old_factory = logging.getLogRecordFactory()

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            correlation_id = _correlation_id.get()
            if correlation_id is not None:
                record.correlation_id = correlation_id
            return record

        logging.setLogRecordFactory(record_factory)
        _factory_installed = True


def current_correlation_id() -> str | None:
    return _correlation_id.get()


class ConversationLogger:
    """Logger with correlation ID support"""

    @staticmethod
    @contextmanager
    def correlation_context(request_id: str) -> Generator[None, None, None]:
        """Tag every record logged in this context (and its tasks) with request_id.

        Backed by a ContextVar, so concurrent requests on one event loop
        keep their own IDs.
        """
        _install_record_factory()
        token = _correlation_id.set(request_id)
        try:
            yield
        finally:
            _correlation_id.reset(token)


class CorrelationFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if not correlation_id:
            return super().format(record)
        # Format a prefixed copy so other handlers see the original message
        prefixed = logging.makeLogRecord(record.__dict__)
        prefixed.msg = f"[{correlation_id[:8]}] {record.getMessage()}"
        prefixed.args = None
        return super().format(prefixed)


class HttpRequestLogDowngradeFilter(logging.Filter):
    """Downgrade noisy third-party HTTP logs to DEBUG."""

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self.prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            for prefix in self.prefixes:
                if record.name.startswith(prefix):
                    record.levelno = logging.DEBUG
                    record.levelname = logging.getLevelName(logging.DEBUG)
                    break
        return True


def normalize_log_level(log_level: str) -> str:
    """Extract the level name, tolerating trailing comments, defaulting to INFO."""
    parts = (log_level or "").split()
    level = parts[0].upper() if parts else "INFO"
    return level if level in VALID_LOG_LEVELS else "INFO"


def configure_root_logging(log_level: str = "INFO") -> logging.Handler:
    """Install the correlation-aware stream handler on the root logger.

    Replaces any existing root handlers, quiets uvicorn and the HTTP client
    libraries, and returns the installed handler.
    """
    level = normalize_log_level(log_level)

    handler = logging.StreamHandler()
    handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))
    handler.setFormatter(
        CorrelationFormatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    # Configure uvicorn to be quieter
    for uvicorn_logger in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(uvicorn_logger).setLevel(logging.WARNING)

    set_noisy_http_logger_levels(level)
    return handler

