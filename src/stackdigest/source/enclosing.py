"""Enclosing-block location (fallback strategy).

When the frame's name cannot be anchored (inlined helpers, macro-generated
functions, mangled names), take the innermost brace block around the target
whose header reads like a function or a property accessor.  Headers are
classified by small named predicates applied in a fixed order, so a new
dialect rule is one more predicate rather than a change to the walk.
"""

from __future__ import annotations

import logging
import re

from stackdigest.config import Settings
from stackdigest.source.balance import match_brace, match_brace_backward
from stackdigest.source.fileview import FileView
from stackdigest.source.result import ExtractionResult
from stackdigest.source.signature import find_signature_start

log = logging.getLogger(__name__)

STRATEGY = "enclosing-block"
EXPRESSION_STRATEGY = "expression-bodied"

# Lines above the target searched for an arrow member.
EXPRESSION_LOOKBACK_LINES = 5

_CONTROL_RE = re.compile(r"\b(if|for|foreach|while|switch|catch|else|do|try|using|lock|fixed)\s*\(")
_TYPE_RE = re.compile(r"\b(class|struct|namespace|enum|union)\b")
_LAMBDA_RE = re.compile(r"\]\s*\(")
_TRAILING_WORD_RE = re.compile(r"(\w+)\s*$")

# symbol prefix -> accessor keywords it compiles from (init-only setters are set_X)
_ACCESSORS = {
    "get_": ("get",),
    "set_": ("set", "init"),
    "add_": ("add",),
    "remove_": ("remove",),
}
_BARE_ACCESSORS = ("get", "set", "init", "add", "remove")


# ---------------------------------------------------------------------------
# Header predicates
# ---------------------------------------------------------------------------


def is_control_statement(header: str) -> bool:
    return bool(_CONTROL_RE.search(header))


def is_type_declaration(header: str) -> bool:
    """``class``/``struct``/... ahead of any parameter list.

    Only the text before the first ``(`` counts, so C parameters such as
    ``struct foo *p`` do not disqualify a function.
    """
    return bool(_TYPE_RE.search(header.split("(", 1)[0]))


def is_lambda_header(header: str) -> bool:
    return bool(_LAMBDA_RE.search(header))


def matches_name_hint(header: str, name_hint: str | None) -> bool:
    hint = (name_hint or "").strip()
    if not hint:
        return True
    if hint.startswith("operator"):
        return "operator" in header
    return hint in header


def looks_like_function_header(header: str, name_hint: str | None = None) -> bool:
    if not header.strip() or "(" not in header:
        return False
    if is_control_statement(header):
        return False
    if is_type_declaration(header):
        return False
    if is_lambda_header(header):
        return False
    return matches_name_hint(header, name_hint)


def wants_accessor(name_hint: str | None) -> tuple[str, ...]:
    """Accessor keywords implied by *name_hint* (``get_Value`` -> ``("get",)``)."""
    hint = (name_hint or "").strip()
    if hint in _BARE_ACCESSORS:
        return (hint,)
    for prefix, keywords in _ACCESSORS.items():
        if hint.startswith(prefix):
            return keywords
    return ()


def looks_like_accessor_header(header: str, name_hint: str | None) -> bool:
    """``get {``, ``set {``... with a keyword the symbol asks for."""
    keywords = wants_accessor(name_hint)
    if not keywords or "(" in header:
        return False
    m = _TRAILING_WORD_RE.search(header)
    return bool(m) and m.group(1) in keywords


# ---------------------------------------------------------------------------
# Header extraction
# ---------------------------------------------------------------------------


def _is_brace_initializer(s: str, open_idx: int, close_idx: int) -> bool:
    """``member{value}`` on one line, without statements inside."""
    inner = s[open_idx + 1 : close_idx]
    if "\n" in inner or ";" in inner:
        return False
    j = open_idx - 1
    while j >= 0 and s[j] in " \t":
        j -= 1
    return j >= 0 and (s[j].isalnum() or s[j] in "_>")


def extract_header(
    cleaned: str,
    brace_idx: int,
    max_chars: int = 8000,
    max_lines: int = 30,
    brace_initializers: bool = False,
) -> str:
    """Text between the previous statement boundary and the ``{`` at *brace_idx*.

    The walk stops at ``;``, ``{`` or ``}`` and never goes further back
    than *max_chars*; only the last *max_lines* lines are kept.
    """
    floor = max(0, brace_idx - max_chars)
    i = brace_idx - 1
    while i >= floor:
        c = cleaned[i]
        if c in ";{":
            break
        if c == "}":
            open_idx = match_brace_backward(cleaned, i, floor)
            if brace_initializers and open_idx >= 0 and _is_brace_initializer(cleaned, open_idx, i):
                i = open_idx - 1
                continue
            break
        i -= 1
    lines = cleaned[i + 1 : brace_idx].rstrip().split("\n")
    return "\n".join(lines[-max_lines:]).strip()


# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------


def header_anchor(cleaned: str, open_idx: int) -> int:
    """Offset on the last header line above the ``{`` at *open_idx*.

    Backtracking starts here so Allman-style headers (``get`` / ``{`` on
    separate lines) keep their header line.
    """
    j = open_idx - 1
    while j >= 0 and cleaned[j].isspace():
        j -= 1
    if j < 0 or cleaned[j] in ";{}":
        return open_idx
    return j


def _iter_enclosing_openers(s: str, target: int):
    """Yield offsets of ``{`` still open at *target*, innermost first."""
    depth = 0
    for i in range(min(target, len(s) - 1), -1, -1):
        c = s[i]
        if c == "}":
            depth += 1
        elif c == "{":
            if depth == 0:
                yield i
            else:
                depth -= 1


def locate_enclosing_block(
    view: FileView,
    target_offset: int,
    name_hint: str | None = None,
    settings: Settings | None = None,
) -> ExtractionResult | None:
    """Innermost block around *target_offset* whose header looks like a function."""
    if settings is None:
        settings = Settings()
    s = view.cleaned_text
    if not s:
        return None

    for open_idx in _iter_enclosing_openers(s, target_offset):
        close_idx = match_brace(s, open_idx)
        if close_idx < 0 or close_idx < target_offset:
            continue
        header = extract_header(
            s,
            open_idx,
            settings.header_backtrack_chars,
            settings.header_max_lines,
            view.dialect.brace_initializers,
        )
        if looks_like_function_header(header, name_hint) or looks_like_accessor_header(header, name_hint):
            start = find_signature_start(view, header_anchor(s, open_idx), settings.header_max_lines)
            log.debug("%s: enclosing block at line %d accepted", view.path, view.line_of(open_idx))
            return ExtractionResult.from_offsets(view, start, close_idx + 1, STRATEGY)

    if view.dialect.expression_bodied:
        return find_expression_bodied_near(view, view.line_of(target_offset), settings)
    return None


def find_expression_bodied_near(
    view: FileView,
    target_line: int,
    settings: Settings | None = None,
) -> ExtractionResult | None:
    """Arrow member (``=> expr;``) on the target line or up to five lines above."""
    if settings is None:
        settings = Settings()
    s = view.cleaned_text
    target_line = max(1, min(target_line, view.line_count))
    for line in range(target_line, max(1, target_line - EXPRESSION_LOOKBACK_LINES) - 1, -1):
        start = view.line_starts[line - 1]
        end = view.line_starts[line] if line < view.line_count else len(s)
        arrow = s.find("=>", start, end)
        if arrow < 0:
            continue
        semi = s.find(";", arrow + 2)
        if semi < 0:
            continue
        sig = find_signature_start(view, arrow, settings.header_max_lines)
        log.debug("%s: expression-bodied member at line %d", view.path, line)
        return ExtractionResult.from_offsets(view, sig, semi + 1, EXPRESSION_STRATEGY)
    return None
