"""Per-file cleaned views and the process-wide view cache."""

from __future__ import annotations

import logging
import os
from bisect import bisect_right
from dataclasses import dataclass

from stackdigest.languages.base import Dialect
from stackdigest.languages.registry import UNKNOWN_DIALECT, dialect_for_path
from stackdigest.source.sanitize import sanitize

log = logging.getLogger(__name__)


def compute_line_starts(text: str) -> tuple[int, ...]:
    starts = [0]
    pos = text.find("\n")
    while pos >= 0:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return tuple(starts)


def split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")


def decode_source(data: bytes) -> str:
    """Decode source bytes: BOM first, otherwise UTF-8 with undecodable bytes replaced."""
    if data[:3] == b"\xef\xbb\xbf":
        return data[3:].decode("utf-8", errors="replace")
    if data[:2] in (b"\xff\xfe", b"\xfe\xff"):
        return data.decode("utf-16", errors="replace")
    return data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class FileView:
    """Raw and cleaned text of one source file plus its line table.

    Immutable once built; safe to share between threads.
    """

    path: str
    raw_text: str
    cleaned_text: str
    line_starts: tuple[int, ...]
    dialect: Dialect

    @classmethod
    def from_text(cls, text: str, path: str = "", dialect: Dialect | None = None) -> "FileView":
        if dialect is None:
            dialect = dialect_for_path(path) if path else UNKNOWN_DIALECT
        return cls(
            path=path,
            raw_text=text,
            cleaned_text=sanitize(text, dialect),
            line_starts=compute_line_starts(text),
            dialect=dialect,
        )

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_of(self, offset: int) -> int:
        """1-based line number containing *offset*."""
        return max(1, bisect_right(self.line_starts, offset))

    def offset_of_line(self, line: int) -> int:
        """Offset of the first character of 1-based *line*.

        Lines past the end of the file map to the last character.
        """
        line = max(1, line)
        if line <= len(self.line_starts):
            return self.line_starts[line - 1]
        return max(0, len(self.raw_text) - 1)

    def line_text(self, line: int) -> str:
        """Raw text of 1-based *line* without its line terminator."""
        if not 1 <= line <= len(self.line_starts):
            return ""
        start = self.line_starts[line - 1]
        end = self.line_starts[line] - 1 if line < len(self.line_starts) else len(self.raw_text)
        return self.raw_text[start:end].rstrip("\r")

    def lines(self) -> list[str]:
        return split_lines(self.raw_text)


def read_file_view(path: str) -> FileView:
    """Read *path* from disk and build its view.  Raises OSError."""
    with open(path, "rb") as fh:
        data = fh.read()
    return FileView.from_text(decode_source(data), path=path)


class FileViewCache:
    """Compute-once map of normalized path -> FileView.

    Readers never lock.  On a miss the view is built outside any lock and
    inserted with ``setdefault``; concurrent builders of the same path all
    produce the same value and the first insert wins.
    """

    def __init__(self) -> None:
        self._entries: dict[str, FileView] = {}

    @staticmethod
    def key_for(path: str) -> str:
        return os.path.normcase(os.path.abspath(path)).casefold()

    def get(self, path: str) -> FileView | None:
        return self._entries.get(self.key_for(path))

    def get_or_build(self, path: str) -> FileView:
        key = self.key_for(path)
        view = self._entries.get(key)
        if view is not None:
            return view
        view = read_file_view(path)
        log.debug("Built view for %s (%d lines, %s)", path, view.line_count, view.dialect.name)
        return self._entries.setdefault(key, view)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self.key_for(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_default_cache = FileViewCache()


def default_cache() -> FileViewCache:
    return _default_cache


def get_file_view(path: str) -> FileView:
    return _default_cache.get_or_build(path)


def clear_cache() -> None:
    _default_cache.clear()
