from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture, idempotent configuration, file
rotation, and that decoder diagnostics reach a configured log file.
"""

import io
import logging
from logging.handlers import QueueHandler
from pathlib import Path
from typing import Generator

import pytest

from textlinesreader import read_lines
from textlinesreader.infra.logging import (
    PACKAGE_LOGGER_NAME,
    LoggingConfig,
    configure_logging,
    parse_level,
    reset_logging,
)
from textlinesreader.infra.logging.core import QUEUE_LISTENER_ATTR
from textlinesreader.infra.logging.handlers import is_own_handler


@pytest.fixture(autouse=True)
def clean_package_logger() -> Generator[None, None, None]:
    """Remove installed handlers before and after each test."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    previous_level = package_logger.level
    reset_logging()
    yield
    reset_logging()
    package_logger.setLevel(previous_level)


def _flush(target: logging.Logger) -> None:
    """Stop the listener so every queued record is written."""
    listener = getattr(target, QUEUE_LISTENER_ATTR)
    listener.stop()



def test_defaults_target_package_logger_at_debug() -> None:
    cfg = LoggingConfig()

    assert cfg.logger_name == "textlinesreader"
    assert cfg.level_number == logging.DEBUG


def test_logging_idempotency() -> None:
    """Repeated configuration must not duplicate handlers."""
    cfg = LoggingConfig(console=True)

    target = configure_logging(cfg)
    initial_handler_count = len(target.handlers)

    configure_logging(cfg)
    assert len(target.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_replaces_listener() -> None:
    target = configure_logging(LoggingConfig())
    first = getattr(target, QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(), force=True)

    assert getattr(target, QUEUE_LISTENER_ATTR) is not first
    assert len([h for h in target.handlers if is_own_handler(h)]) == 1


def test_foreign_handlers_survive_reconfiguration() -> None:
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    foreign = logging.StreamHandler(io.StringIO())
    package_logger.addHandler(foreign)
    try:
        configure_logging(LoggingConfig())
        configure_logging(LoggingConfig(), force=True)
        assert foreign in package_logger.handlers
    finally:
        package_logger.removeHandler(foreign)


def test_queue_listener_architecture() -> None:
    """The package logger receives a single tagged QueueHandler; root is untouched."""
    root_handlers = list(logging.getLogger().handlers)
    target = configure_logging(LoggingConfig(level="INFO"))

    own = [h for h in target.handlers if is_own_handler(h)]

    assert target.name == PACKAGE_LOGGER_NAME
    assert len(own) == 1
    assert isinstance(own[0], QueueHandler)
    assert getattr(target, QUEUE_LISTENER_ATTR) is not None
    assert target.level == logging.INFO
    assert logging.getLogger().handlers == root_handlers


def test_no_handlers_requested_leaves_logger_untouched() -> None:
    target = configure_logging(LoggingConfig(console=False, log_file=None))
    assert not [h for h in target.handlers if is_own_handler(h)]


def test_log_rotation(tmp_path: Path) -> None:
    """Rotation happens once the size limit is exceeded."""
    log_file = tmp_path / "rotate.log"
    cfg = LoggingConfig(
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    target = configure_logging(cfg)
    logger = logging.getLogger(f"{PACKAGE_LOGGER_NAME}.rotation")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)
    _flush(target)

    assert log_file.exists()
    assert (tmp_path / "rotate.log.1").exists(), "Rotation backup file was not created."


def test_decoder_diagnostics_reach_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "decoder.log"
    target = configure_logging(LoggingConfig(console=False, log_file=str(log_file)))

    list(read_lines(io.BytesIO(b"a\nb\n"), str, lines_to_skip=1))
    _flush(target)

    content = log_file.read_text(encoding="utf-8")
    assert "textlinesreader.core.decoder" in content
    assert "1 record(s) produced, 1 line(s) skipped" in content


def test_child_logger_narrows_output(tmp_path: Path) -> None:
    log_file = tmp_path / "reader.log"
    name = f"{PACKAGE_LOGGER_NAME}.core.line_reader"
    target = configure_logging(LoggingConfig(logger_name=name, console=False, log_file=str(log_file)))
    try:
        list(read_lines(io.BytesIO(b"\xef\xbb\xbfa\n"), str))
        _flush(target)
    finally:
        reset_logging(name)
        target.setLevel(logging.NOTSET)

    content = log_file.read_text(encoding="utf-8")
    assert "Byte-order mark selects utf-8" in content
    assert "Decoding session" not in content


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    (" Warn ", logging.WARNING),
    ("", logging.INFO),
    (None, logging.INFO),
    ("verbose", logging.INFO),
])
def test_parse_level(name, expected: int) -> None:
    assert parse_level(name) == expected
