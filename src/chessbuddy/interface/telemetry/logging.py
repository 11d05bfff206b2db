from __future__ import annotations

from typing import Any
import logging
import sys
import structlog

_SHARED_PROCESSORS = (
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
)


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = "INFO", *, json: bool = True) -> None:
    """Route structlog through stdlib logging.

    Services emit one JSON object per line; the terminal game uses the
    human-readable console renderer instead.
    """
    min_level = _coerce_level(level)
    logging.basicConfig(format="%(message)s", level=min_level, stream=sys.stdout)

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None):
    return structlog.get_logger(name or "chessbuddy")


def bind_trace(logger: Any, trace_id: str | None = None, **kwargs) -> Any:
    """Bind the request trace id (when present) plus any session context."""
    if trace_id:
        kwargs.setdefault("trace_id", trace_id)
    return logger.bind(**kwargs)


__all__ = ["setup_logging", "get_logger", "bind_trace"]
