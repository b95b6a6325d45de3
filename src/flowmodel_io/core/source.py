"""Byte sources that can be read from the start any number of times."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import BinaryIO

from .errors import SourceError

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


class RewindableSource:
    """
    Hands out independent readers over the same bytes.

    A file is reopened for every view. Standard input cannot be rewound, so
    it is read completely on the first request and every view replays the
    buffered bytes.
    """

    def __init__(
        self,
        path: Path | None = None,
        stream: BinaryIO | None = None,
        data: bytes | None = None,
        max_bytes: int | None = None
    ):
        self._path = path
        self._stream = stream
        self._buffer = data
        self._max_bytes = max_bytes
        self._is_stdin = path is None and data is None

    @classmethod
    def from_path(cls, path: Path | str) -> "RewindableSource":
        return cls(path=Path(path))

    @classmethod
    def from_stdin(
        cls,
        stream: BinaryIO | None = None,
        max_bytes: int | None = None
    ) -> "RewindableSource":
        """Source over standard input (or ``stream``), buffered on first read."""
        return cls(stream=stream, max_bytes=max_bytes)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RewindableSource":
        return cls(data=bytes(data))

    @property
    def location(self) -> str:
        if self._path is not None:
            return str(self._path)
        if self._is_stdin:
            return "standard input"
        return "memory"

    def get_fresh_view(self) -> BinaryIO:
        """
        Return a new binary reader positioned at the first byte.

        Raises:
            SourceError: If the file cannot be opened or the input cannot be read
        """
        if self._path is not None:
            try:
                return open(self._path, "rb")
            except OSError as e:
                raise SourceError(
                    f"Could not read file `{self._path}`.", location=str(self._path)
                ) from e

        if self._buffer is None:
            self._buffer = self._read_stream()
        return io.BytesIO(self._buffer)

    def _read_stream(self) -> bytes:
        stream = self._stream if self._stream is not None else sys.stdin.buffer
        try:
            if self._max_bytes is None:
                data = stream.read()
            else:
                data = stream.read(self._max_bytes + 1)
        except (OSError, ValueError) as e:
            raise SourceError(f"Could not read {self.location}.", location=self.location) from e

        if isinstance(data, str):
            data = data.encode("utf-8")
        if self._max_bytes is not None and len(data) > self._max_bytes:
            raise SourceError(
                f"Input on {self.location} is larger than the limit of {self._max_bytes} bytes.",
                location=self.location,
            )
        logger.debug(f"Buffered {len(data)} bytes from {self.location}")
        return data

    def __repr__(self) -> str:
        return f"RewindableSource({self.location!r})"


def open_source(path: Path | str, max_bytes: int | None = None) -> RewindableSource:
    """
    Source for a command-line file argument; ``-`` means standard input.

    The file is not opened here, so a missing file is reported by the first
    ``get_fresh_view`` call.
    """
    if str(path) == STDIN_MARKER:
        return RewindableSource.from_stdin(max_bytes=max_bytes)
    return RewindableSource.from_path(path)
