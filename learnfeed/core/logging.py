"""Root logging setup.

Records carry ``user_id`` and ``storage_mode`` fields. Callers may pass them
through ``extra``; otherwise ``user_id`` falls back to the user bound for
the current request (see ``bind_user``) and ``storage_mode`` to "-".
"""

import logging
import os
from contextvars import ContextVar
from typing import Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | user=%(user_id)s "
    "storage=%(storage_mode)s | %(message)s"
)

_current_user: ContextVar[str] = ContextVar("learnfeed_log_user", default="-")


def bind_user(user_id: str) -> None:
    """Tag log records emitted in the current context with ``user_id``."""
    _current_user.set(user_id)


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "user_id"):
            record.user_id = _current_user.get()
        if not hasattr(record, "storage_mode"):
            record.storage_mode = "-"
        return True


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """(Re)configure the root logger with one stream handler."""
    name = (level or DEFAULT_LEVEL).upper()
    resolved_level = logging.getLevelName(name)
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(resolved_level)
    # Reloads would otherwise stack handlers
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and any(
            isinstance(f, ContextFilter) for f in h.filters
        ):
            root.removeHandler(h)
    root.addHandler(handler)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(resolved_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures the root logger on first use."""
    root = logging.getLogger()
    if not any(
        any(isinstance(f, ContextFilter) for f in h.filters) for h in root.handlers
    ):
        setup_logging()
    return logging.getLogger(name)
