from __future__ import annotations

"""
Decoder Diagnostics Setup.

Idempotent attachment of handlers to the package logger for applications
that want to see decoding sessions. Records are handed to a QueueHandler
and written by a QueueListener thread, so console and file I/O never run on
the thread that is consuming decoded records.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from textlinesreader.infra.logging.config import PACKAGE_LOGGER_NAME, LoggingConfig
from textlinesreader.infra.logging.handlers import (
    create_console_handler,
    create_rotating_file_handler,
    is_own_handler,
    tag_handler,
)

CONFIGURED_FLAG_ATTR: str = "_textlinesreader_configured"
QUEUE_LISTENER_ATTR: str = "_textlinesreader_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route decoder diagnostics to the console and/or a rotating file.

    Repeated calls for the same logger are no-ops unless ``force`` is set, in
    which case the handlers and listener installed by a previous call are
    replaced. Handlers attached by other code are left alone.

    Args:
        cfg: Logging settings.
        force: Re-install handlers even if already configured.

    Returns:
        logging.Logger: The configured logger.
    """
    target = logging.getLogger(cfg.logger_name)
    if getattr(target, CONFIGURED_FLAG_ATTR, False) and not force:
        return target

    level = cfg.level_number
    target.setLevel(level)

    _remove_own_handlers(target)
    _stop_listener(target)

    formatter = logging.Formatter(cfg.fmt, datefmt=cfg.datefmt)
    handlers: List[logging.Handler] = []
    if cfg.console:
        handlers.append(create_console_handler(level, formatter))
    if cfg.log_file:
        fh = create_rotating_file_handler(cfg.log_file, level, formatter, cfg.max_bytes, cfg.backup_count)
        if fh is not None:
            handlers.append(fh)

    if not handlers:
        return target

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    listener.start()

    target.addHandler(tag_handler(QueueHandler(log_queue)))
    setattr(target, QUEUE_LISTENER_ATTR, listener)
    setattr(target, CONFIGURED_FLAG_ATTR, True)

    # Flush pending records on interpreter exit
    atexit.register(_stop_listener, target)
    return target


def reset_logging(logger_name: str = PACKAGE_LOGGER_NAME) -> None:
    """Detach the handlers installed by ``configure_logging`` and stop its listener."""
    target = logging.getLogger(logger_name)
    _stop_listener(target)
    _remove_own_handlers(target)
    if hasattr(target, CONFIGURED_FLAG_ATTR):
        delattr(target, CONFIGURED_FLAG_ATTR)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _remove_own_handlers(target: logging.Logger) -> None:
    for h in list(target.handlers):
        if is_own_handler(h):
            target.removeHandler(h)
            h.close()


def _stop_listener(target: logging.Logger) -> None:
    listener: Optional[QueueListener] = getattr(target, QUEUE_LISTENER_ATTR, None)
    if listener is None:
        return
    setattr(target, QUEUE_LISTENER_ATTR, None)
    # stop() on a listener whose thread already ended would fail
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
    for h in listener.handlers:
        h.close()
