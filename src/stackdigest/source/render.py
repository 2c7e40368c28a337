"""Turn a located span (or a bare line) into the text shown to the user."""

from __future__ import annotations

from stackdigest.source.fileview import FileView, split_lines
from stackdigest.source.result import ExtractionResult

OMITTED_ABOVE = "// ... source omitted (above)"
OMITTED_BELOW = "// ... source omitted (below)"

DEFAULT_MARKER = "==>"


def crop_window(total: int, focus: int, max_lines: int) -> tuple[int, int]:
    """Return ``(begin, end)`` 0-based half-open rows of a window around *focus*.

    The window holds exactly *max_lines* rows (or all of them when the span
    is shorter) and slides inward when the centre would pass an edge.
    """
    if max_lines <= 0 or total <= max_lines:
        return 0, total
    half = max_lines // 2
    begin = max(0, focus - half)
    end = min(total, begin + max_lines)
    begin = max(0, end - max_lines)
    return begin, end


def render_snippet(
    view: FileView,
    result: ExtractionResult,
    target_line: int,
    max_lines: int = 120,
    marker: str = DEFAULT_MARKER,
) -> str:
    """Stamp *marker* on the target row of *result* and crop to *max_lines*.

    A target outside the span marks the nearest edge row.  ``max_lines <= 0``
    disables cropping.
    """
    rows = split_lines(view.raw_text[result.start : result.end])
    rel = max(0, min(target_line - result.start_line, len(rows) - 1))
    rows[rel] = f"{marker} {rows[rel]}"

    begin, end = crop_window(len(rows), rel, max_lines)
    out = []
    if begin > 0:
        out.append(OMITTED_ABOVE)
    out.extend(rows[begin:end])
    if end < len(rows):
        out.append(OMITTED_BELOW)
    return "\n".join(out)


def render_nearby(
    view: FileView,
    target_line: int,
    radius: int = 24,
    marker: str = DEFAULT_MARKER,
) -> str:
    """Numbered raw lines within *radius* of *target_line*; never fails."""
    lines = view.lines()
    if not view.raw_text:
        return ""
    target_line = max(1, min(target_line, len(lines)))
    first = max(1, target_line - radius)
    last = min(len(lines), target_line + max(0, radius))
    blank = " " * len(marker)
    out = []
    for n in range(first, last + 1):
        prefix = marker if n == target_line else blank
        out.append(f"{prefix} {n:6}: {lines[n - 1]}")
    return "\n".join(out)
