from __future__ import annotations

"""
Decoder Diagnostics Configuration.

Describes where the package's own log records go when an application opts
in. The records come from the ``textlinesreader`` logger hierarchy: session
start and end in the decoder, byte-order mark detection in the line reader,
and option substitutions in the options models.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

PACKAGE_LOGGER_NAME: str = "textlinesreader"


def parse_level(level: Any) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    if not level:
        return logging.INFO
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


@dataclass(frozen=True)
class LoggingConfig:
    """
    Where and how verbosely decoder diagnostics are written.

    Session records are emitted at DEBUG, so that is the default level.

    Attributes:
        logger_name: Logger receiving the handlers. Defaults to the package
            logger; a child name narrows output to one module.
        level: Minimum severity name. Unknown names fall back to INFO.
        console: Emit records on stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Number of rolled-over files kept.
        fmt: Record format shared by console and file output.
        datefmt: Timestamp format.
    """
    logger_name: str = PACKAGE_LOGGER_NAME
    level: str = "DEBUG"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def level_number(self) -> int:
        return parse_level(self.level)
