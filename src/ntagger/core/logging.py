"""Structured logging for tag generation runs.

structlog renders every event through stdlib handlers, one handler per
configured output (stderr, stdout or a file). Console handlers go quiet while
``suppress_console_logs`` is active; file handlers never do.

Each run carries a short ``run_id`` so that events from one invocation can be
picked out of a shared log file.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from ntagger.config.models import LoggingConfig, LogOutputConfig

CONSOLE_DESTINATIONS = ("stderr", "stdout")

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_log_file: Path | None = None


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Bind a run id to the current context, generating one if needed."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def get_log_file_path() -> Path | None:
    """First file output of the active configuration, if any."""
    return _log_file


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict["run_id"] = rid
    return event_dict


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    _add_run_id,  # type: ignore[list-item]
]


def _level(name: str | None, default: int = logging.WARNING) -> int:
    if not name:
        return default
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


class ConsoleSuppressingFilter(logging.Filter):
    """Drops records while the CLI has console logs suppressed."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from ntagger.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _formatter(output: LogOutputConfig) -> logging.Formatter:
    if output.format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        colors = output.destination in CONSOLE_DESTINATIONS and stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS)


def _handler(output: LogOutputConfig, root_level: int) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8", errors="backslashreplace")

    if output.destination in CONSOLE_DESTINATIONS:
        handler.addFilter(ConsoleSuppressingFilter())
    handler.setLevel(_level(output.level, root_level))
    handler.setFormatter(_formatter(output))
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Install structlog and one stdlib handler per output.

    Without ``config`` a single stderr output is used, rendered as JSON when
    ``json_format`` is set. Calling this again replaces earlier handlers.
    """
    global _log_file
    from ntagger.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Level changes must apply to loggers created before reconfiguration
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(root_level)

    files = [Path(o.destination) for o in config.outputs if o.destination not in CONSOLE_DESTINATIONS]
    _log_file = files[0] if files else None
    for output in config.outputs:
        root.addHandler(_handler(output, root_level))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
