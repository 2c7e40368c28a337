"""Public extraction entry point: run the strategy chain for one location.

Strategies are tried in order; each takes ``(view, target_offset, name,
settings)`` and returns an :class:`ExtractionResult` or None.  When every
strategy fails the caller still gets text: a numbered window of raw lines
around the target and a degraded status.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from stackdigest.callstack.symbols import anchor_name, extract_function_name
from stackdigest.config import Settings
from stackdigest.source.anchor import locate_by_name
from stackdigest.source.enclosing import locate_enclosing_block
from stackdigest.source.fileview import FileView, FileViewCache, default_cache
from stackdigest.source.render import render_nearby, render_snippet
from stackdigest.source.result import ExtractionResult

log = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_MISSING_LOCATION = "missing_location"
STATUS_FILE_NOT_FOUND = "file_not_found"
STATUS_NO_STRUCTURAL_MATCH = "no_structural_match"
STATUS_UNREADABLE = "unreadable"

MSG_MISSING_LOCATION = "No file path / line info available for this frame."
MSG_NO_MATCH = "Could not confidently locate function body. Showing nearby lines."

Strategy = Callable[[FileView, int, str, Settings], "ExtractionResult | None"]


@dataclass
class ExtractionOutcome:
    """What an extraction produced, successful or not.

    ``ok`` is True only for a structural match; the nearby fallback sets
    ``ok=False`` but still fills ``code``.
    """

    ok: bool
    code: str
    message: str
    status: str
    path: str | None = None
    result: ExtractionResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "status": self.status,
            "message": self.message,
            "path": self.path,
            "range": self.result.to_dict() if self.result else None,
            "code": self.code,
        }


def _by_name(view: FileView, target_offset: int, name: str, settings: Settings) -> ExtractionResult | None:
    if not name:
        return None
    return locate_by_name(view, name, target_offset, settings)


def _by_enclosing_block(view: FileView, target_offset: int, name: str, settings: Settings) -> ExtractionResult | None:
    return locate_enclosing_block(view, target_offset, name, settings)


DEFAULT_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("name-anchor", _by_name),
    ("enclosing-block", _by_enclosing_block),
)


def target_offset_for_line(view: FileView, line: int) -> int:
    """Offset of the first non-blank character of *line* (clamped to the file)."""
    offset = view.offset_of_line(line)
    if line > view.line_count:
        return offset
    text = view.raw_text
    while offset < len(text) and text[offset] in " \t":
        offset += 1
    return offset


def locate_function(
    view: FileView,
    name: str,
    target_line: int,
    settings: Settings | None = None,
    strategies: Sequence[tuple[str, Strategy]] = DEFAULT_STRATEGIES,
) -> ExtractionResult | None:
    """First result from *strategies* for *name* around *target_line*."""
    if settings is None:
        settings = Settings()
    target = target_offset_for_line(view, target_line)
    for label, strategy in strategies:
        result = strategy(view, target, name, settings)
        if result is not None:
            log.debug("%s:%d %s -> lines %d-%d", view.path, target_line, label, result.start_line, result.end_line)
            return result
        log.debug("%s:%d %s found nothing", view.path, target_line, label)
    return None


def extract_from_view(
    view: FileView,
    function_name: str,
    target_line: int,
    settings: Settings | None = None,
    strategies: Sequence[tuple[str, Strategy]] = DEFAULT_STRATEGIES,
) -> ExtractionOutcome:
    """Run the chain on an already-built view.  Never raises."""
    if settings is None:
        settings = Settings()
    target_line = max(1, target_line)
    name = anchor_name((function_name or "").strip())
    result = locate_function(view, name, target_line, settings, strategies)
    if result is not None:
        code = render_snippet(
            view,
            result,
            target_line,
            settings.max_source_lines,
            settings.current_line_marker,
        )
        return ExtractionOutcome(
            ok=True,
            code=code,
            message=f"Lines {result.start_line}–{result.end_line}",
            status=STATUS_OK,
            path=view.path,
            result=result,
        )
    code = render_nearby(view, target_line, settings.fallback_radius, settings.current_line_marker)
    return ExtractionOutcome(
        ok=False,
        code=code,
        message=MSG_NO_MATCH,
        status=STATUS_NO_STRUCTURAL_MATCH,
        path=view.path,
    )


def extract_function_source(
    source_path: str | None,
    source_line: int | None,
    symbol: str,
    settings: Settings | None = None,
    cache: FileViewCache | None = None,
) -> ExtractionOutcome:
    """Extract the function for a ``(path, line, symbol)`` location.

    The path is remapped through ``settings.path_remaps`` first.  Missing
    location info, missing files and read errors come back as outcomes with
    the matching status rather than exceptions.
    """
    if settings is None:
        settings = Settings()
    if cache is None:
        cache = default_cache()

    if not source_path or not source_path.strip() or source_line is None:
        return ExtractionOutcome(ok=False, code="", message=MSG_MISSING_LOCATION, status=STATUS_MISSING_LOCATION)

    path = settings.remap_path(source_path.strip())
    if not os.path.isfile(path):
        return ExtractionOutcome(
            ok=False,
            code="",
            message=f"Source file not found: {path}",
            status=STATUS_FILE_NOT_FOUND,
            path=path,
        )

    try:
        view = cache.get_or_build(path)
    except OSError as exc:
        log.warning("Could not read %s: %s", path, exc)
        return ExtractionOutcome(
            ok=False,
            code="",
            message=f"Source file could not be read: {path} ({exc.strerror or exc})",
            status=STATUS_UNREADABLE,
            path=path,
        )

    return extract_from_view(view, extract_function_name(symbol or ""), source_line, settings)


def extract_frame_source(frame, settings: Settings | None = None, cache: FileViewCache | None = None) -> ExtractionOutcome:
    """Convenience wrapper for a :class:`~stackdigest.callstack.frames.CallStackFrame`."""
    return extract_function_source(frame.source_path, frame.source_line, frame.symbol, settings, cache)
