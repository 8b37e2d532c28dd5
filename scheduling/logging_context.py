"""Request ID logging context for tracing scheduling calls across modules.

Provides a request_id-aware logger that attaches a correlation ID to every
log message, so one booking attempt can be followed from the service
boundary through the conflict resolver and into the ledger.

Usage:
    from scheduling.logging_context import get_request_logger, request_scope

    logger = get_request_logger(__name__)
    with request_scope("REQ-abc123"):
        logger.info("Processing booking")  # record.request_id == "REQ-abc123"
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id: ContextVar[str] = ContextVar("request_id", default="NO_REQUEST_ID")


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request ID for the duration of the block, generating one if needed."""
    rid = request_id or f"REQ-{uuid.uuid4().hex[:8]}"
    token = _request_id.set(rid)
    try:
        yield rid
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
