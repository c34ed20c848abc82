"""Decoded, line-oriented readers over plain or gzip-compressed files.

Compression is picked once from the file name and hidden behind a single
``LineSource`` type, so the pipeline only ever sees text lines.
"""

from __future__ import annotations

import gzip
import io
import logging
import re
import zlib
from contextlib import ExitStack
from enum import Enum
from itertools import islice
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterator, List, Optional

from bigtextsearcher.core.config import COMPRESSED_SUFFIX
from bigtextsearcher.core.errors import DecodeError, ErrorCode, InputNotFound, SearchError

LOGGER = logging.getLogger(__name__)

# utf-8-sig skips a leading byte-order mark and otherwise decodes as utf-8.
TEXT_ENCODING = "utf-8-sig"
# Undecodable bytes come through as lone surrogates so each line can be checked
# on its own; a strict decoder would reject a whole read chunk at once.
TEXT_ERRORS = "surrogateescape"
_ESCAPED_BYTE = re.compile("[\udc80-\udcff]")


class SourceKind(str, Enum):
    PLAIN = "plain"
    GZIP = "gzip"


def is_compressed(path: Path) -> bool:
    """The file name suffix is the only compression signal; content is never sniffed."""

    return path.name.lower().endswith(COMPRESSED_SUFFIX)


def _open_plain(raw: BinaryIO, stack: ExitStack) -> BinaryIO:
    return raw


def _open_gzip(raw: BinaryIO, stack: ExitStack) -> BinaryIO:
    # GzipFile never closes a caller-supplied fileobj; the stack still owns ``raw``.
    # Its read1() hands out each decompressed block as soon as it is inflated,
    # so the lines before a truncated tail are still delivered.
    return stack.enter_context(gzip.GzipFile(fileobj=raw, mode="rb"))


_OPENERS: Dict[SourceKind, Callable[[BinaryIO, ExitStack], BinaryIO]] = {
    SourceKind.PLAIN: _open_plain,
    SourceKind.GZIP: _open_gzip,
}


def _strip_terminator(line: str) -> str:
    # Universal newlines already folded CRLF and CR into a single "\n".
    return line[:-1] if line.endswith("\n") else line


class LineSource:
    """Single forward pass over the decoded lines of one input file.

    The source owns every stream it opens and releases them on ``close()``,
    which also runs when the source is used as a context manager.
    """

    def __init__(self, path: Path, kind: SourceKind, buffer_size: int) -> None:
        self.path = path
        self.kind = kind
        self.buffer_size = buffer_size
        self._stack = ExitStack()
        try:
            raw = self._stack.enter_context(open(path, "rb", buffering=buffer_size))
            binary = _OPENERS[kind](raw, self._stack)
            self._text = self._stack.enter_context(
                io.TextIOWrapper(binary, encoding=TEXT_ENCODING, errors=TEXT_ERRORS)
            )
        except FileNotFoundError as exc:
            self._stack.close()
            raise InputNotFound(
                f"Input file not found: {path}", context={"input_path": str(path)}
            ) from exc
        except OSError as exc:
            self._stack.close()
            raise SearchError(
                f"Unable to open input file {path}: {exc}",
                code=ErrorCode.IO_ERROR,
                context={"input_path": str(path)},
            ) from exc
        self._lines = self._iter_lines()
        self._pending_error: Optional[SearchError] = None
        self.closed = False

    def __enter__(self) -> "LineSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        return self._lines

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._stack.close()
        LOGGER.debug("Closed %s source %s", self.kind.value, self.path)

    def read_batch(self, max_lines: int) -> List[str]:
        """Return up to ``max_lines`` further lines; an empty list means end of input.

        When reading fails partway through, the lines read before the failure
        are returned first and the error is raised by the next call.
        """

        if self._pending_error is not None:
            error, self._pending_error = self._pending_error, None
            raise error
        batch: List[str] = []
        try:
            for line in islice(self._lines, max_lines):
                batch.append(line)
        except SearchError as exc:
            if not batch:
                raise
            self._pending_error = exc
        return batch

    def _iter_lines(self) -> Iterator[str]:
        readline = self._text.readline
        line_number = 0
        while True:
            try:
                line = readline()
            except (gzip.BadGzipFile, EOFError, zlib.error) as exc:
                raise DecodeError(
                    f"Compressed input is corrupt or truncated: {self.path} ({exc})",
                    context={"input_path": str(self.path)},
                ) from exc
            except OSError as exc:
                raise SearchError(
                    f"Failed reading input file {self.path}: {exc}",
                    code=ErrorCode.IO_ERROR,
                    context={"input_path": str(self.path)},
                ) from exc
            if not line:
                return
            line_number += 1
            if not line.isascii() and _ESCAPED_BYTE.search(line):
                raise DecodeError(
                    f"Input is not valid UTF-8 text: {self.path} (line {line_number})",
                    context={"input_path": str(self.path), "line": line_number},
                )
            yield _strip_terminator(line)


def open_line_source(path: Path, buffer_size: int) -> LineSource:
    """Open ``path`` as a LineSource, decompressing when the name ends in .gz."""

    kind = SourceKind.GZIP if is_compressed(path) else SourceKind.PLAIN
    LOGGER.debug("Opening %s as %s source (buffer=%s bytes)", path, kind.value, buffer_size)
    return LineSource(path, kind, buffer_size)
