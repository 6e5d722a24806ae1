from __future__ import annotations

"""
Buffered Line Reader.

Decodes a binary stream into successive text lines. Reads the source in
fixed-size chunks, feeds them to an incremental decoder so multi-byte
characters may straddle chunk boundaries, and splits on the three classic
line terminators (LF, CR, CRLF). Optionally lets a byte-order mark at the
start of the stream override the configured encoding.
"""

import codecs
import logging
import re
from typing import BinaryIO, Iterator, List, Optional, Tuple

from textlinesreader.domain.options import (
    BUFFER_SIZE_DEFAULT,
    DETECT_ENCODING_FROM_BOM_DEFAULT,
    ENCODING_DEFAULT,
    LEAVE_OPEN_DEFAULT,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# BYTE-ORDER MARKS
# -----------------------------------------------------------------------------

# UTF-32 LE must be checked before UTF-16 LE: its mark starts with FF FE too.
_DETECTABLE_BOMS: List[Tuple[bytes, str]] = [
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
]

# Preamble of fixed-endian codecs, keyed by canonical codec name.
# BOM-aware codecs (utf-8-sig, utf-16, utf-32) consume their own mark.
_CODEC_PREAMBLES = {
    "utf-8": codecs.BOM_UTF8,
    "utf-16-le": codecs.BOM_UTF16_LE,
    "utf-16-be": codecs.BOM_UTF16_BE,
    "utf-32-le": codecs.BOM_UTF32_LE,
    "utf-32-be": codecs.BOM_UTF32_BE,
}

_MAX_BOM_LENGTH = 4
_TERMINATOR_RE = re.compile(r"\r\n|\r|\n")


# -----------------------------------------------------------------------------
# LINE READER
# -----------------------------------------------------------------------------
class LineReader:
    """
    Forward-only reader yielding decoded lines without their terminators.

    The reader owns its decoding state. Whether it also owns the source
    stream is decided by ``leave_open``: when False, ``close()`` closes the
    source as well.

    Raises (at construction):
        ValueError: If the stream is closed or not readable.
        LookupError: If ``encoding`` names no known codec.
    """

    def __init__(
            self,
            stream: BinaryIO,
            encoding: str = ENCODING_DEFAULT,
            detect_encoding_from_bom: bool = DETECT_ENCODING_FROM_BOM_DEFAULT,
            buffer_size: int = BUFFER_SIZE_DEFAULT,
            leave_open: bool = LEAVE_OPEN_DEFAULT,
    ) -> None:
        if getattr(stream, "closed", False):
            raise ValueError("Cannot read lines from a closed stream.")
        readable = getattr(stream, "readable", None)
        if callable(readable) and not readable():
            raise ValueError("Cannot read lines from a stream that is not readable.")

        self._stream = stream
        self._leave_open = leave_open
        self._buffer_size = max(1, int(buffer_size))
        self._detect = detect_encoding_from_bom

        # Fail fast on unknown codec names and on bytes-to-bytes codecs
        codec_info = codecs.lookup(encoding)
        if not getattr(codec_info, "_is_text_encoding", True):
            raise LookupError(f"{encoding!r} is not a text encoding.")
        self.encoding: str = codec_info.name
        self._decoder: Optional[codecs.IncrementalDecoder] = None

        self._text = ""
        self._pos = 0
        # Offset before which the buffered text holds no terminator
        self._scan = 0
        self._eof = False
        self._closed = False

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def readline(self) -> Optional[str]:
        """
        Return the next line without its terminator, or None at end of stream.

        Raises:
            ValueError: If the reader has been closed.
            UnicodeDecodeError: If the bytes cannot be decoded.
        """
        if self._closed:
            raise ValueError("I/O operation on a closed line reader.")

        while True:
            match = _TERMINATOR_RE.search(self._text, max(self._pos, self._scan))
            if match is not None:
                # A lone CR at the end of the buffer may be the first half of CRLF
                if match.group() == "\r" and match.end() == len(self._text) and not self._eof:
                    self._fill()
                    continue
                line = self._text[self._pos:match.start()]
                self._pos = match.end()
                return line

            if self._eof:
                if self._pos < len(self._text):
                    line = self._text[self._pos:]
                    self._pos = len(self._text)
                    return line
                return None

            self._fill()

    def close(self) -> None:
        """Release decoding state and, unless left open, the source stream."""
        if self._closed:
            return
        self._closed = True
        self._text = ""
        self._pos = 0
        self._decoder = None
        self._scan = 0
        if not self._leave_open:
            self._stream.close()

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.readline()
        if line is None:
            raise StopIteration
        return line

    def __enter__(self) -> "LineReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------
    def _fill(self) -> None:
        """Read one more chunk from the source and append its decoded text."""
        if self._decoder is None:
            data, raw_length = self._read_preamble()
            if raw_length and not data:
                # Only a byte-order mark so far
                return
        else:
            data = self._stream.read(self._buffer_size) or b""

        if data:
            text = self._decoder.decode(data)
        else:
            text = self._decoder.decode(b"", final=True)
            self._eof = True

        remaining = len(self._text) - self._pos
        self._text = self._text[self._pos:] + text
        self._pos = 0
        # Step back one character so a trailing CR can pair with a leading LF
        self._scan = max(0, remaining - 1)

    def _read_preamble(self) -> Tuple[bytes, int]:
        """Read the first chunk, settle the codec and strip any byte-order mark."""
        data = self._stream.read(self._buffer_size) or b""
        while data and len(data) < _MAX_BOM_LENGTH:
            more = self._stream.read(self._buffer_size)
            if not more:
                break
            data += more

        bom = b""
        if self._detect:
            for mark, codec_name in _DETECTABLE_BOMS:
                if data.startswith(mark):
                    logger.debug("Byte-order mark selects %s over %s", codec_name, self.encoding)
                    self.encoding = codec_name
                    bom = mark
                    break

        if not bom:
            preamble = _CODEC_PREAMBLES.get(self.encoding)
            if preamble and data.startswith(preamble):
                bom = preamble

        self._decoder = codecs.getincrementaldecoder(self.encoding)()
        return data[len(bom):], len(data)
