from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A sample record type and the sample lines it is built from.
3. Helpers writing text lines into in-memory binary streams.
"""

import io
import os
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Sample Record Type
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Person:
    """Comma-separated 'last, first, email' record."""
    last_name: str
    first_name: str
    email_address: str

    @classmethod
    def from_line(cls, line: str) -> "Person":
        last_name, first_name, email_address = (part.strip() for part in line.split(","))
        return cls(last_name, first_name, email_address)


PERSON_LINES: List[str] = [
    "Smith, John, jsmith@gmail.com",
    "Jones, Mary, mjones@hotmail.com",
    "Johnson, Steve, sjohnson@yahoo.com",
]


# -----------------------------------------------------------------------------
# Stream Helpers
# -----------------------------------------------------------------------------
class TrackingBytesIO(io.BytesIO):
    """BytesIO counting how many times close() is requested."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


def save_lines(
        values: Iterable[str],
        encoding: str = "utf-8",
        newline: str = "\n",
        stream_cls: Callable[[], io.BytesIO] = io.BytesIO,
) -> io.BytesIO:
    """
    Write each value followed by ``newline`` into a rewound binary stream.

    BOM-carrying codecs (utf-8-sig, utf-16, utf-32) emit their mark once at
    the start, as a text writer would.
    """
    stream = stream_cls()
    text = "".join(f"{value}{newline}" for value in values)
    stream.write(text.encode(encoding))
    stream.seek(0)
    return stream


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def person_lines() -> List[str]:
    return list(PERSON_LINES)


@pytest.fixture
def expected_people() -> List[Person]:
    return [Person.from_line(line) for line in PERSON_LINES]


@pytest.fixture
def tracking_stream(person_lines: List[str]) -> TrackingBytesIO:
    """UTF-8 person lines in a stream that records close() calls."""
    return save_lines(person_lines, stream_cls=TrackingBytesIO)
