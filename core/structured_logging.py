"""Structured logging helpers with scan correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_SCAN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "scan_id", default="-"
)
_SOURCE_FILE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "source_file", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | scan_id=%(scan_id)s | file=%(source_file)s | "
    "%(name)s | %(message)s"
)


class _ScanContextFilter(logging.Filter):
    """Inject scan correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.scan_id = _SCAN_ID_VAR.get("-")
        record.source_file = _SOURCE_FILE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if not any(isinstance(f, _ScanContextFilter) for f in handler.filters):
            handler.addFilter(_ScanContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with scan/file context."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_scan_id(scan_id: str | None = None) -> str:
    """Set or generate the scan correlation ID."""
    value = scan_id or uuid.uuid4().hex[:12]
    _SCAN_ID_VAR.set(value)
    return value


def get_scan_id() -> str:
    """Return the current scan correlation ID, or ``-`` outside a scan."""
    return _SCAN_ID_VAR.get("-")


def get_source_file() -> str:
    """Return the file being processed, or ``-`` between files."""
    return _SOURCE_FILE_VAR.get("-")


@contextmanager
def file_scope(file_path: str) -> Iterator[None]:
    """Tag log records emitted while a single file is being processed.

    Must not span a ``yield`` of a generator; the finder enters it only around
    the synchronous parse of one file.
    """
    token = _SOURCE_FILE_VAR.set(file_path)
    try:
        yield
    finally:
        _SOURCE_FILE_VAR.reset(token)
