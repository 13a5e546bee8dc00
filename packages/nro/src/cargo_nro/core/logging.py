from __future__ import annotations

import logging
import sys
from typing import Any, Protocol, runtime_checkable

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

_CONFIGURED = False


@runtime_checkable
class ILogger(Protocol):
    """The logging calls the build pipeline makes."""

    def debug(self, event: str, **kw: Any) -> Any: ...
    def info(self, event: str, **kw: Any) -> Any: ...
    def warning(self, event: str, **kw: Any) -> Any: ...
    def error(self, event: str, **kw: Any) -> Any: ...


def _handler(fmt: str) -> logging.Handler:
    # stdout carries build output only; every log record goes to stderr
    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler(stream=sys.stderr)
    else:
        handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=False,
            show_path=False,
            console=Console(stderr=True),
        )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _processors(fmt: str) -> list[Any]:
    procs: list[Any] = [merge_contextvars, structlog.processors.add_log_level]
    if fmt == "json":
        procs.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    procs += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        procs.append(structlog.processors.JSONRenderer())
    else:
        procs.append(structlog.processors.KeyValueRenderer(sort_keys=True))
    return procs


def configure_logging(*, level: str = "INFO", fmt: str = "console") -> None:
    """
    Route structlog through stdlib logging onto stderr, once per process.

    `fmt` is "console" (rich, key=value) or "json" (one object per line).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = level.upper()
    handler = _handler(fmt)
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    structlog.configure(
        processors=_processors(fmt),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def get_logger(name: str = "cargo_nro") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind(**values: Any) -> None:
    bind_contextvars(**values)


def clear_bindings() -> None:
    clear_contextvars()
