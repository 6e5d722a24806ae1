from __future__ import annotations

"""
textlinesreader: lazy decoding of text lines into typed records.
"""

import logging

from textlinesreader.core.decoder import read_file_lines, read_lines
from textlinesreader.core.line_reader import LineReader
from textlinesreader.domain.contracts import FromLine, LineBuilder
from textlinesreader.domain.options import (
    ReadLinesFileOptions,
    ReadLinesStreamOptions,
    options_from_dict,
)

__version__ = "1.0.0"

# Library default: stay silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FromLine",
    "LineBuilder",
    "LineReader",
    "ReadLinesFileOptions",
    "ReadLinesStreamOptions",
    "options_from_dict",
    "read_file_lines",
    "read_lines",
]
