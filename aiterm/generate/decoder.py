# Incremental decoder for streamGenerateContent responses.
#
# The service writes a sequence of JSON objects with no reliable delimiter and
# no alignment to network fragments. We keep one text buffer, look for the
# first '{', count braces until the depth returns to zero, parse that slice
# and emit the first candidate's first part text.
#
# Known limitation: braces inside quoted string values are counted like
# structural braces, so a literal '{' or '}' in a text value breaks that
# object. The object is then dropped like any other malformed slice.

from __future__ import annotations

import codecs
import logging
from typing import Callable, Iterable, Iterator, List, Optional

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class _Part(BaseModel):
    text: str


class _Content(BaseModel):
    parts: List[_Part]


class _Candidate(BaseModel):
    content: _Content


class GenerateResponse(BaseModel):
    """Envelope of one streamed Gemini response object (extra keys ignored)."""
    candidates: List[_Candidate]


Extractor = Callable[[str], Optional[str]]


def gemini_text(obj: str) -> Optional[str]:
    """Text of the first part of the first candidate, or None if absent/invalid."""
    try:
        env = GenerateResponse.model_validate_json(obj)
    except ValidationError as e:
        logger.debug("Dropping unparsable stream object (%d chars): %s", len(obj), e.error_count())
        return None
    if not env.candidates or not env.candidates[0].content.parts:
        return None
    return env.candidates[0].content.parts[0].text


class StreamDecoder:
    """
    Feed raw byte fragments in arrival order; get back the text deltas that
    became complete. Not thread-safe, one instance per stream.
    """

    def __init__(self, extract: Extractor = gemini_text):
        self._extract = extract
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        # Brace scan state for the object starting at buffer[0].
        self._depth = 0
        self._scanned = 0

    @property
    def pending(self) -> str:
        """Text still waiting for its object to be balanced."""
        return self._buffer

    def feed(self, fragment: bytes) -> List[str]:
        self._buffer += self._utf8.decode(fragment)
        return self._drain()

    def close(self) -> List[str]:
        """Flush the byte decoder; a truncated trailing object is dropped."""
        self._buffer += self._utf8.decode(b"", final=True)
        out = self._drain()
        if self._buffer:
            logger.debug("Stream closed with %d chars of unbalanced object dropped", len(self._buffer))
        self._reset()
        return out

    def _reset(self) -> None:
        self._buffer = ""
        self._depth = 0
        self._scanned = 0

    def _drain(self) -> List[str]:
        out: List[str] = []
        while True:
            if self._scanned == 0:
                start = self._buffer.find("{")
                if start < 0:
                    self._buffer = ""
                    return out
                # bytes before the first '{' are never part of an object
                self._buffer = self._buffer[start:]

            end = self._scan()
            if end is None:
                return out

            obj = self._buffer[:end]
            self._buffer = self._buffer[end:]
            self._depth = 0
            self._scanned = 0

            text = self._extract(obj)
            if text:
                out.append(text)

    def _scan(self) -> Optional[int]:
        """Index one past the balancing '}', or None if the object is incomplete."""
        buf = self._buffer
        depth = self._depth
        for i in range(self._scanned, len(buf)):
            c = buf[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
            if depth == 0:
                return i + 1
        self._depth = depth
        self._scanned = len(buf)
        return None


def decode_stream(fragments: Iterable[bytes], extract: Extractor = gemini_text) -> Iterator[str]:
    """Lazily turn an iterable of byte fragments into ordered text deltas."""
    decoder = StreamDecoder(extract)
    for fragment in fragments:
        if not fragment:
            continue
        yield from decoder.feed(fragment)
    yield from decoder.close()
