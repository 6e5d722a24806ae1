from __future__ import annotations

"""
Decoding Options Domain Models.

Immutable configuration values that describe how a byte stream is turned
into text lines and which of those lines are kept. Every field is normalized
once at construction: out-of-range input is replaced by the documented
default instead of raising, so an instantiated options value is always valid.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------------
LINES_TO_SKIP_DEFAULT: int = 0
ENCODING_DEFAULT: str = "utf-8"
DETECT_ENCODING_FROM_BOM_DEFAULT: bool = True
BUFFER_SIZE_DEFAULT: int = 1024
LEAVE_OPEN_DEFAULT: bool = True

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


# -----------------------------------------------------------------------------
# FIELD NORMALIZERS
# -----------------------------------------------------------------------------
def normalize_lines_to_skip(value: Any) -> int:
    """Return a non-negative skip count, substituting the default otherwise."""
    count = _to_int(value)
    if count is None or count < 0:
        logger.debug("lines_to_skip=%r replaced by default %d", value, LINES_TO_SKIP_DEFAULT)
        return LINES_TO_SKIP_DEFAULT
    return count


def normalize_encoding(value: Optional[str]) -> str:
    """Return the codec name to decode with, substituting UTF-8 when unset."""
    if not value:
        if value is not None:
            logger.debug("Empty encoding replaced by default %r", ENCODING_DEFAULT)
        return ENCODING_DEFAULT
    return str(value)


def normalize_buffer_size(value: Any) -> int:
    """Return a positive buffer size, substituting the default otherwise."""
    size = _to_int(value)
    if size is None or size < 1:
        logger.debug("buffer_size=%r replaced by default %d", value, BUFFER_SIZE_DEFAULT)
        return BUFFER_SIZE_DEFAULT
    return size


# -----------------------------------------------------------------------------
# OPTIONS MODELS
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ReadLinesFileOptions:
    """
    Decoding settings for reading a file the library opens itself.

    Attributes:
        lines_to_skip: Number of leading decoded lines discarded before any
            record is built. Negative or non-integer input becomes 0;
            integer strings are converted.
        encoding: Codec name used to decode bytes. None or "" becomes UTF-8.
            Unknown names are accepted here and fail when decoding starts.
        detect_encoding_from_bom: Whether a byte-order mark at the start of
            the stream overrides ``encoding``.
        buffer_size: Number of bytes requested from the source per read.
            Values below 1 and non-integer input become 1024.
    """
    lines_to_skip: int = LINES_TO_SKIP_DEFAULT
    encoding: str = ENCODING_DEFAULT
    detect_encoding_from_bom: bool = DETECT_ENCODING_FROM_BOM_DEFAULT
    buffer_size: int = BUFFER_SIZE_DEFAULT

    def __post_init__(self) -> None:
        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "lines_to_skip", normalize_lines_to_skip(self.lines_to_skip))
        object.__setattr__(self, "encoding", normalize_encoding(self.encoding))
        object.__setattr__(self, "detect_encoding_from_bom", bool(self.detect_encoding_from_bom))
        object.__setattr__(self, "buffer_size", normalize_buffer_size(self.buffer_size))


@dataclass(frozen=True)
class ReadLinesStreamOptions(ReadLinesFileOptions):
    """
    Decoding settings for reading a caller-supplied stream.

    Attributes:
        leave_open: When True the source stream stays open after iteration
            ends and the caller remains responsible for it. When False the
            decoder closes it together with its line reader.
    """
    leave_open: bool = LEAVE_OPEN_DEFAULT

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "leave_open", bool(self.leave_open))

    @classmethod
    def from_file_options(
            cls,
            file_options: Optional[ReadLinesFileOptions],
            *,
            leave_open: bool = LEAVE_OPEN_DEFAULT,
    ) -> "ReadLinesStreamOptions":
        """
        Derive stream options from file options.

        Copies every shared field; ``leave_open`` takes its own value since
        file options have no notion of source ownership.

        Args:
            file_options: Source settings. None yields defaults.
            leave_open: Ownership flag for the resulting options.

        Returns:
            ReadLinesStreamOptions: An independent options value.
        """
        if file_options is None:
            return cls(leave_open=leave_open)
        return cls(
            lines_to_skip=file_options.lines_to_skip,
            encoding=file_options.encoding,
            detect_encoding_from_bom=file_options.detect_encoding_from_bom,
            buffer_size=file_options.buffer_size,
            leave_open=leave_open,
        )


# -----------------------------------------------------------------------------
# MAPPING LOADER
# -----------------------------------------------------------------------------
def options_from_dict(data: Any) -> Tuple[ReadLinesStreamOptions, List[str]]:
    """
    Build stream options from a plain mapping such as parsed JSON.

    Values are merged over the defaults. Anything that cannot be used is
    replaced by its default and reported; this function never raises for
    bad values.

    Args:
        data: Mapping of option names to raw values.

    Returns:
        Tuple[ReadLinesStreamOptions, List[str]]: The options and a list of
        warnings describing every substituted or ignored entry.
    """
    warnings: List[str] = []

    if not isinstance(data, Mapping):
        msg = f"Options must be a mapping, got {type(data).__name__}. Using defaults."
        warnings.append(msg)
        logger.warning(msg)
        return ReadLinesStreamOptions(), warnings

    known = {f.name for f in fields(ReadLinesStreamOptions)}
    for key in data:
        if key not in known:
            warnings.append(f"Unknown option '{key}' ignored.")

    values: Dict[str, Any] = {}
    values["lines_to_skip"] = _as_int(data.get("lines_to_skip"), LINES_TO_SKIP_DEFAULT, "lines_to_skip", 0, warnings)
    values["buffer_size"] = _as_int(data.get("buffer_size"), BUFFER_SIZE_DEFAULT, "buffer_size", 1, warnings)
    values["encoding"] = _as_encoding(data.get("encoding"), warnings)
    values["detect_encoding_from_bom"] = _as_bool(
        data.get("detect_encoding_from_bom"),
        DETECT_ENCODING_FROM_BOM_DEFAULT,
        "detect_encoding_from_bom",
        warnings,
    )
    values["leave_open"] = _as_bool(data.get("leave_open"), LEAVE_OPEN_DEFAULT, "leave_open", warnings)

    for msg in warnings:
        logger.warning(msg)

    return ReadLinesStreamOptions(**values), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------
def _to_int(value: Any) -> Optional[int]:
    """Integer value of an int or an integer string; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_int(value: Any, fallback: int, field: str, minimum: int, warnings: List[str]) -> int:
    if value is None:
        return fallback
    number = _to_int(value)
    if number is None:
        warnings.append(f"'{field}' expects an integer, got {value!r}. Using {fallback}.")
        return fallback
    if number < minimum:
        warnings.append(f"'{field}' must be >= {minimum}, got {number}. Using {fallback}.")
        return fallback
    return number


def _as_encoding(value: Any, warnings: List[str]) -> str:
    if value is None:
        return ENCODING_DEFAULT
    if not isinstance(value, str) or not value.strip():
        warnings.append(f"'encoding' must be a codec name, got {value!r}. Using {ENCODING_DEFAULT!r}.")
        return ENCODING_DEFAULT
    return value.strip()


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str]) -> bool:
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_STRINGS:
            return True
        if token in _FALSE_STRINGS:
            return False
    warnings.append(f"'{field}' expects a boolean, got {value!r}. Using {fallback}.")
    return fallback
