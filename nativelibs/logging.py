"""Logging utilities for nativelibs commands.

Records emitted while a pipeline stage runs carry a ``stage`` attribute, and
the formatters installed by :func:`configure_logging` render it as a
``[stage]`` tag in front of the message.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

_LOGGER_NAME = "nativelibs"
_CONSOLE_FORMAT = "[nativelibs] %(levelname)s %(stage_tag)s%(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(stage_tag)s%(message)s"

PipelineLogger = Union[logging.Logger, logging.LoggerAdapter]


class StageFormatter(logging.Formatter):
    """Formatter exposing ``%(stage_tag)s``; empty outside a stage."""

    def format(self, record: logging.LogRecord) -> str:
        stage = getattr(record, "stage", None)
        record.stage_tag = f"[{stage}] " if stage else ""
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the nativelibs hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def stage_logger(logger: logging.Logger, stage: str) -> logging.LoggerAdapter:
    """Bind ``stage`` to every record logged through the returned adapter."""
    return logging.LoggerAdapter(logger, {"stage": stage})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the nativelibs logger.

    Stage transitions log at INFO, individual steps at DEBUG, so ``verbose``
    is what makes per-step output visible.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    handlers[0].setFormatter(StageFormatter(_CONSOLE_FORMAT))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StageFormatter(_FILE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


__all__ = [
    "PipelineLogger",
    "StageFormatter",
    "configure_logging",
    "get_logger",
    "stage_logger",
]
