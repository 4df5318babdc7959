from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | user=%(username)s | "
    "%(message)s"
)

# Per-request values read by LoggingContextFilter
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
username_var: ContextVar[Optional[str]] = ContextVar("username", default=None)

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("uvicorn.access", "aiomysql", "passlib")


class LoggingContextFilter(logging.Filter):
    """
    Stamp every record with the request's correlation id and the username of
    the bearer token, or '-' outside a request / before authentication.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = correlation_id_var.get() or "-"
        record.username = username_var.get() or "-"
        return True


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Route all logging (ours, uvicorn's, SQLAlchemy's) through one stdout handler.

    Safe to call more than once; earlier root handlers are replaced. Unknown
    level names fall back to INFO.
    """
    numeric = _resolve_level(level)
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(numeric)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
