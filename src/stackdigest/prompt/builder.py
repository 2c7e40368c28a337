"""Assemble the LLM prompt: template, raw call stack, per-frame source."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from stackdigest.callstack.frames import CallStackFrame
from stackdigest.config import Settings
from stackdigest.source.extractor import ExtractionOutcome, extract_frame_source

log = logging.getLogger(__name__)

NO_SOURCE = "// Source not found or could not detect function body."


def build_prompt(
    template: str,
    raw_callstack: str,
    frames_with_source: Sequence[tuple[CallStackFrame, str | None]],
) -> str:
    lines: list[str] = []
    if template and template.strip():
        lines.append(template.rstrip())
        lines.append("")

    lines.append("")
    lines.append("Input: Callstack")
    lines.append("```")
    lines.append((raw_callstack or "").rstrip())
    lines.append("```")
    lines.append("")

    lines.append("Input: Per-frame source code (best effort)")
    for frame, source in frames_with_source:
        lines.append("")
        lines.append(f"[Frame {frame.index}] {frame.module}!{frame.symbol}")
        if frame.source_path and frame.source_path.strip():
            line = frame.source_line if frame.source_line is not None else ""
            lines.append(f"File: {frame.source_path}:{line}")
        lines.append("```cpp")
        lines.append(source.rstrip() if source else NO_SOURCE)
        lines.append("```")

    return "\n".join(lines) + "\n"


def collect_frame_sources(
    frames: Sequence[CallStackFrame],
    settings: Settings | None = None,
    limit: int | None = None,
    jobs: int = 4,
) -> list[tuple[CallStackFrame, ExtractionOutcome]]:
    """Extract source for the first *limit* frames, in frame order.

    *limit* defaults to ``settings.frames_to_annotate``.  Extraction runs on
    a thread pool of *jobs* workers; the shared file-view cache makes
    repeated files cheap.
    """
    if settings is None:
        settings = Settings()
    if limit is None:
        limit = settings.frames_to_annotate
    selected = list(frames[: max(0, limit)])
    if not selected:
        return []

    def _one(frame: CallStackFrame) -> ExtractionOutcome:
        return extract_frame_source(frame, settings)

    if jobs <= 1 or len(selected) == 1:
        outcomes = [_one(f) for f in selected]
    else:
        with ThreadPoolExecutor(max_workers=min(jobs, len(selected))) as pool:
            outcomes = list(pool.map(_one, selected))

    found = sum(1 for o in outcomes if o.ok)
    log.debug("Extracted %d/%d frame source(s)", found, len(selected))
    return list(zip(selected, outcomes))


def assemble_prompt(
    template: str,
    raw_callstack: str,
    frames: Sequence[CallStackFrame],
    settings: Settings | None = None,
    limit: int | None = None,
    jobs: int = 4,
) -> tuple[str, list[tuple[CallStackFrame, ExtractionOutcome]]]:
    """Collect sources and build the prompt; returns the prompt and the outcomes.

    Frames whose extraction fell back to nearby lines still contribute that
    text.
    """
    collected = collect_frame_sources(frames, settings, limit, jobs)
    prompt = build_prompt(template, raw_callstack, [(f, o.code or None) for f, o in collected])
    return prompt, collected
