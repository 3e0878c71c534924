from __future__ import annotations

"""
Logging bootstrap.

Builder modules only ever call logging.getLogger(__name__). This module wires
the root logger once per process: a QueueHandler on the root feeds a
QueueListener that owns the console and build-log handlers, so the walk never
blocks on log I/O. Handlers installed by a host (pytest, a build system) are
left alone.
"""

import atexit
import logging
import os
import sys
from dataclasses import dataclass, field
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from queue import SimpleQueue
from typing import List, Optional

from resolution_map_builder.infra.logging.config import (
    BUILD_LOG_DATEFMT,
    BUILD_LOG_FORMAT,
    CONSOLE_FORMAT,
    LoggingConfig,
)


@dataclass
class _LoggingState:
    """What configure_logging() attached to the root logger."""
    queue_handler: Optional[QueueHandler] = None
    listener: Optional[QueueListener] = None
    sinks: List[logging.Handler] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.queue_handler is not None


_state = _LoggingState()
_atexit_registered = False


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route builder logging through a background listener.

    Calling it again is a no-op unless force is set, in which case the
    previous sinks are flushed and replaced.

    Args:
        cfg: Logging settings for this run.
        force: Rebuild the handler chain even if one is active.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if _state.active and not force:
        return root

    shutdown_logging()
    root.setLevel(cfg.level)

    sinks: List[logging.Handler] = []
    if cfg.console:
        sinks.append(_console_sink(cfg))
    if cfg.build_log:
        build_log = _build_log_sink(cfg)
        if build_log is not None:
            sinks.append(build_log)

    if not sinks:
        return root

    queue_handler = QueueHandler(SimpleQueue())
    listener = QueueListener(queue_handler.queue, *sinks, respect_handler_level=True)
    listener.start()
    root.addHandler(queue_handler)

    _state.queue_handler = queue_handler
    _state.listener = listener
    _state.sinks = sinks
    _register_atexit()
    return root


def shutdown_logging() -> None:
    """Drain pending records and detach everything configure_logging() added."""
    if _state.listener is not None:
        _state.listener.stop()
    if _state.queue_handler is not None:
        logging.getLogger().removeHandler(_state.queue_handler)
        _state.queue_handler.close()
    for sink in _state.sinks:
        sink.close()

    _state.queue_handler = None
    _state.listener = None
    _state.sinks = []


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ==============================================================================
# SINKS
# ==============================================================================

def _console_sink(cfg: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(cfg.level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _build_log_sink(cfg: LoggingConfig) -> Optional[logging.Handler]:
    """Open the rotating build log; an unwritable path only costs the log."""
    path = os.path.abspath(cfg.build_log)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=cfg.build_log_max_bytes,
            backupCount=cfg.build_log_backups,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open build log '{path}': {e}\n")
        return None

    handler.setLevel(cfg.level)
    handler.setFormatter(logging.Formatter(BUILD_LOG_FORMAT, datefmt=BUILD_LOG_DATEFMT))
    return handler


def _register_atexit() -> None:
    global _atexit_registered
    if not _atexit_registered:
        atexit.register(shutdown_logging)
        _atexit_registered = True
