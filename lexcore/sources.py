"""Line-oriented input source shared by the manifest and document readers.

A source yields each line with its terminator stripped, or a
``LineReadError`` marker for a line that could not be decoded.  Callers
decide what to do with markers; the source itself never skips silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from lexcore.errors import SourceOpenError


# A read that keeps failing this many times in a row ends the source.
MAX_CONSECUTIVE_READ_ERRORS = 3


@dataclass(frozen=True)
class LineReadError:
    lineno: int
    reason: str


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw


class LineSource:
    """Iterator over ``str | LineReadError``.  Not restartable."""

    def __init__(self, path: str, fh: BinaryIO, encoding: str = "utf-8"):
        self.path = path
        self.encoding = encoding
        self._fh = fh
        self._lineno = 0
        self._done = False
        self._failures = 0

    def __enter__(self) -> LineSource:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __iter__(self) -> Iterator[str | LineReadError]:
        return self

    def __next__(self) -> str | LineReadError:
        if self._done:
            raise StopIteration
        try:
            raw = self._fh.readline()
        except OSError as e:
            # Skip just this line; give up only if the error never clears.
            self._failures += 1
            self._lineno += 1
            if self._failures >= MAX_CONSECUTIVE_READ_ERRORS:
                self._done = True
            return LineReadError(self._lineno, f"read failed: {e}")
        self._failures = 0
        if not raw:
            self._done = True
            raise StopIteration

        self._lineno += 1
        try:
            return _strip_terminator(raw).decode(self.encoding)
        except UnicodeDecodeError as e:
            return LineReadError(self._lineno, f"undecodable bytes: {e.reason}")

    def close(self) -> None:
        self._done = True
        self._fh.close()


def open_lines(path: str, encoding: str = "utf-8") -> LineSource:
    """Open ``path`` for line iteration.

    Raises ``SourceOpenError`` for anything that prevents opening: missing
    file, permissions, a directory, an empty path.
    """
    if not path:
        raise SourceOpenError(path, "empty path")
    try:
        fh = Path(path).open("rb")
    except OSError as e:
        raise SourceOpenError(path, e.strerror or str(e)) from e
    return LineSource(path, fh, encoding)
