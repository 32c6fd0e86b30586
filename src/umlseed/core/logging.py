"""Structured logging with run correlation and multi-output support.

Every ``parse`` and ``generate`` invocation runs inside ``run_context()``,
so all events of one extraction or generation share a ``run_id``. Console
outputs are muted while a rich spinner is live; file outputs keep
receiving records and the first file is reported back to the user when a
command fails.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from umlseed.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

# First file destination of the active configuration
_log_file_path: Path | None = None


@contextmanager
def run_context(run_id: str | None = None) -> Iterator[str]:
    """Tag every event logged inside the block with one run ID."""
    rid = run_id or uuid4().hex[:12]
    token = _run_id.set(rid)
    try:
        yield rid
    finally:
        _run_id.reset(token)


def get_log_file_path() -> Path | None:
    return _log_file_path


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := _run_id.get():
        event_dict["run_id"] = rid
    return event_dict


class ConsoleSuppressingFilter(logging.Filter):
    """Filter that blocks console log records while suppression is active.

    File handlers keep receiving records.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        # Import here to avoid circular dependency
        from umlseed.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _create_handler(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path, mode="a")

    handler.addFilter(ConsoleSuppressingFilter())
    return handler


def _create_formatter(
    output: LogOutputConfig,
    shared_processors: list[structlog.types.Processor],
) -> logging.Formatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=output.destination == "stderr" and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog through stdlib handlers, one per configured output."""
    global _log_file_path
    from umlseed.config.models import LoggingConfig

    config = config or LoggingConfig()
    levels = logging.getLevelNamesMapping()
    default_level = levels[config.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)

    # Faker logs locale lookups at DEBUG on every provider access
    logging.getLogger("faker").setLevel(logging.WARNING)

    _log_file_path = None
    for output in config.outputs:
        if output.destination not in ("stderr", "stdout") and _log_file_path is None:
            _log_file_path = Path(output.destination)

        handler = _create_handler(output)
        handler.setLevel(levels[output.level or config.level])
        handler.setFormatter(_create_formatter(output, shared_processors))
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
