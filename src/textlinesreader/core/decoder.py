from __future__ import annotations

"""
Lazy Line-to-Record Decoder.

Turns a binary stream into a lazily produced sequence of records, one record
per decoded line. Nothing is read, and nothing is validated, until the caller
asks for the first record. The line reader created for a session is released
on every exit path: exhaustion, early abandonment of the iterator, or a fault
raised by the stream or by the record builder.
"""

import logging
import os
from typing import Any, BinaryIO, Iterator, Optional, Union

from textlinesreader.core.line_reader import LineReader
from textlinesreader.domain.contracts import resolve_builder
from textlinesreader.domain.options import (
    ReadLinesFileOptions,
    ReadLinesStreamOptions,
    normalize_lines_to_skip,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


# -----------------------------------------------------------------------------
# STREAM DECODING
# -----------------------------------------------------------------------------
def read_lines(
        stream: Optional[BinaryIO],
        build: Any,
        options: Optional[ReadLinesFileOptions] = None,
        *,
        lines_to_skip: Optional[int] = None,
) -> Iterator[Any]:
    """
    Lazily build one record per line of a binary stream.

    The returned iterator is forward-only and single-pass. Validation of
    ``stream`` and ``build`` happens on the first ``next()``, not here.

    Args:
        stream: Binary file-like object positioned where decoding starts.
        build: Record type or factory building one record from one line.
            A type exposing a ``from_line`` class method is called through it.
        options: Decoding settings. None uses the defaults. File options
            are accepted and leave the stream open.
        lines_to_skip: Shortcut overriding ``options.lines_to_skip``.

    Returns:
        Iterator[Any]: Records in source order, after the skipped prefix.

    Raises (on first pull):
        TypeError: If ``stream`` is None or ``build`` cannot build from a line.
        ValueError: If ``stream`` is closed or not readable.
        LookupError: If the configured encoding is unknown.
    """
    return _decode(stream, build, options, lines_to_skip)


def _decode(
        stream: Optional[BinaryIO],
        build: Any,
        options: Optional[ReadLinesFileOptions],
        lines_to_skip: Optional[int],
) -> Iterator[Any]:
    if stream is None:
        raise TypeError("Argument 'stream' must not be None.")

    if options is None:
        options = ReadLinesStreamOptions()
    elif not isinstance(options, ReadLinesStreamOptions):
        options = ReadLinesStreamOptions.from_file_options(options)
    skip = options.lines_to_skip if lines_to_skip is None else normalize_lines_to_skip(lines_to_skip)

    try:
        builder = resolve_builder(build)
        reader = LineReader(
            stream,
            encoding=options.encoding,
            detect_encoding_from_bom=options.detect_encoding_from_bom,
            buffer_size=options.buffer_size,
            leave_open=options.leave_open,
        )
    except Exception:
        # An owned stream is released even when the session never starts reading
        if not options.leave_open:
            stream.close()
        raise
    logger.debug(
        "Decoding session started (encoding=%s, lines_to_skip=%d, leave_open=%s)",
        reader.encoding, skip, options.leave_open,
    )

    skipped = 0
    produced = 0
    outcome = "abandoned"
    try:
        while True:
            line = reader.readline()
            if line is None:
                break
            if skipped < skip:
                skipped += 1
                continue
            record = builder(line)
            produced += 1
            yield record
        outcome = "exhausted"
    except Exception:
        outcome = "faulted"
        raise
    finally:
        reader.close()
        logger.debug(
            "Decoding session %s: %d record(s) produced, %d line(s) skipped",
            outcome, produced, skipped,
        )


# -----------------------------------------------------------------------------
# FILE DECODING
# -----------------------------------------------------------------------------
def read_file_lines(
        path: PathLike,
        build: Any,
        options: Optional[ReadLinesFileOptions] = None,
        *,
        lines_to_skip: Optional[int] = None,
) -> Iterator[Any]:
    """
    Lazily build one record per line of a file.

    The file is opened read-only right away, so a missing or unreadable path
    fails at call time. Decoding itself stays lazy. The file is owned by the
    returned iterator and is closed when iteration ends, is abandoned, or
    faults.

    Args:
        path: Path of an existing file.
        build: Record type or factory building one record from one line.
        options: File decoding settings. None uses the defaults.
        lines_to_skip: Shortcut overriding ``options.lines_to_skip``.

    Returns:
        Iterator[Any]: Records in file order, after the skipped prefix.

    Raises:
        OSError: If the file cannot be opened.
    """
    stream_options = ReadLinesStreamOptions.from_file_options(options, leave_open=False)
    stream = open(path, "rb")
    logger.debug("Opened %s for line decoding", path)
    return _decode(stream, build, stream_options, lines_to_skip)
