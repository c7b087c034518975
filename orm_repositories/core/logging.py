"""
Logging setup shared by the repositories and the startup lifecycle.

Hosts call configure_logging() once at boot, or pass log_level to
database_lifespan. Repositories set the model context around each write.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional


# Context variables for enriched logging
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
model_var: ContextVar[Optional[str]] = ContextVar("model", default=None)


class LoggingContextFilter(logging.Filter):
    """
    Logging filter that injects correlation_id and model from contextvars
    into each log record so formatters can include them.

    If no values are present in the context, placeholders are used.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        cid = correlation_id_var.get()
        model = model_var.get()
        setattr(record, "correlation_id", cid or "-")
        setattr(record, "model", model or "-")
        return True


# PUBLIC_INTERFACE
@contextmanager
def model_context(model_name: str) -> Iterator[None]:
    """Set the model name seen by LoggingContextFilter for the enclosed block."""
    token = model_var.set(model_name)
    try:
        yield
    finally:
        model_var.reset(token)


# PUBLIC_INTERFACE
def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with a structured format and context filter."""
    handler = logging.StreamHandler(stream=sys.stdout)
    fmt = (
        "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | model=%(model)s | "
        "%(message)s"
    )
    formatter = logging.Formatter(fmt=fmt)
    handler.setFormatter(formatter)
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    # Remove pre-existing default handlers configured elsewhere (e.g., basicConfig)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
