"""Parse debugger call-stack text into frames.

Handles the Visual Studio "Call Stack" window copy format::

    UnrealEditor-IrisCore.dll!UE::Net::Private::FReplicationWriter::Write(...) Line 424
        at C:\\UnrealEngine\\Engine\\Source\\Runtime\\Net\\Iris\\ReplicationWriter.cpp(424)
    [Inline Frame] UnrealEditor-Mover.dll!operator<<(FArchive &) Line 1777
    kernel32.dll!00007ff919167374()

Lines that are not frames are ignored; an ``at <path>(<line>)`` line right
after a frame supplies that frame's source location.
"""

from __future__ import annotations

import logging
import re
import sys

from stackdigest.callstack.frames import CallStackFrame

log = logging.getLogger(__name__)

_FRAME_LINE_RE = re.compile(
    r"^\s*(?:\[(?P<inline>Inline Frame)\]\s*)?(?P<module>[^!\s]+)!(?P<symbol>.+?)(?:\s+Line\s+(?P<line>\d+))?\s*$"
)
_AT_LINE_RE = re.compile(r"^\s*at\s+(?P<path>.+)\((?P<line>\d+)\)\s*$")


def _to_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_callstack(text: str) -> list[CallStackFrame]:
    """Return the frames found in *text*, indexed in order of appearance."""
    frames: list[CallStackFrame] = []
    if not text or not text.strip():
        return frames

    lines = text.replace("\r\n", "\n").split("\n")
    i = 0
    while i < len(lines):
        m = _FRAME_LINE_RE.match(lines[i])
        if not m:
            i += 1
            continue

        path = None
        source_line = None
        if i + 1 < len(lines):
            at = _AT_LINE_RE.match(lines[i + 1])
            if at:
                path = at.group("path").strip()
                source_line = _to_int(at.group("line"))
                i += 1

        frames.append(
            CallStackFrame(
                index=len(frames),
                module=m.group("module").strip(),
                symbol=m.group("symbol").strip(),
                is_inline=bool(m.group("inline")),
                reported_line=_to_int(m.group("line")),
                source_path=path,
                source_line=source_line,
            )
        )
        i += 1

    log.debug("Parsed %d frame(s) from %d line(s)", len(frames), len(lines))
    return frames


def read_callstack(path: str = "-") -> str:
    """Read call-stack text from *path*, or from stdin when *path* is ``-``."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
