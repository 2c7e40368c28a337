"""Name-anchored function location (primary strategy).

Occurrences of the frame's short function name near the target line are
tried nearest-first.  Each one must parse as a signature: the name, an
optional ``<...>`` argument list, a balanced ``(...)`` parameter list, then
any run of post-signature decorations (qualifiers, attributes, trailing
return types, constraints, constructor initializers, macro invocations)
ending in a body ``{...}`` or an expression body ``=> ...;``.  A bare ``;``
means the hit was a declaration or a call and the candidate is rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from stackdigest.config import Settings
from stackdigest.source.balance import (
    match_angle,
    match_brace,
    match_bracket,
    match_paren,
    skip_whitespace,
)
from stackdigest.source.fileview import FileView
from stackdigest.source.result import ExtractionResult
from stackdigest.source.signature import find_signature_start

log = logging.getLogger(__name__)

STRATEGY = "name-anchor"

# Decoration scans give up after this many characters without a terminator.
_MAX_DECORATION_CHARS = 4096
_OPERATOR_CHARS = frozenset("+-*/%^&|~!=<>,")
# Constraint clauses end any initializer list before the body
_CONSTRAINT_WORDS = frozenset(("requires", "where"))
# Punctuation that may appear between ')' and the body without being a group
_PASSTHROUGH_PUNCT = frozenset("&*.,")


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


# ---------------------------------------------------------------------------
# Candidate enumeration
# ---------------------------------------------------------------------------


def iter_name_hits(
    cleaned: str,
    name: str,
    target: int,
    window: int,
    cutoff: int,
) -> Iterator[int]:
    """Yield offsets of *name* in *cleaned*, nearest to *target* first.

    All hits at or before the target come first in decreasing order, then
    hits after it in increasing order.  Both directions are confined to
    ``target +/- window`` and stop once a hit lies more than *cutoff*
    characters from the target.
    """
    if not name or not cleaned:
        return
    target = max(0, min(target, len(cleaned) - 1))
    left = max(0, target - window)
    right = min(len(cleaned), target + window)

    end = target + len(name)
    while True:
        hit = cleaned.rfind(name, left, end)
        if hit < 0 or hit < target - cutoff:
            break
        yield hit
        end = hit - 1 + len(name)

    pos = target + 1
    while pos < right:
        hit = cleaned.find(name, pos, right)
        if hit < 0 or hit > target + cutoff:
            break
        yield hit
        pos = hit + len(name)


def is_whole_identifier(cleaned: str, hit: int, name: str) -> bool:
    """Reject hits that are part of a longer identifier (``xFoo``, ``Foo2``)."""
    if _is_ident_char(name[0]) and hit > 0 and _is_ident_char(cleaned[hit - 1]):
        return False
    after = hit + len(name)
    if _is_ident_char(name[-1]) and after < len(cleaned) and _is_ident_char(cleaned[after]):
        return False
    return True


# ---------------------------------------------------------------------------
# Signature grammar
# ---------------------------------------------------------------------------


def skip_operator_token(s: str, i: int) -> int:
    """Skip the token after the word ``operator``: ``<<``, ``()``, ``[]``, ``bool``..."""
    n = len(s)
    i = skip_whitespace(s, i)
    if i >= n:
        return i
    if s[i] == "(":
        inner = skip_whitespace(s, i + 1)
        if inner < n and s[inner] == ")":
            return inner + 1
        return i
    if s[i] == "[":
        close = match_bracket(s, i)
        return i if close < 0 else close + 1
    j = i
    while j < n and s[j] in _OPERATOR_CHARS:
        j += 1
    if j > i:
        return j
    # conversion operators, new/delete, user-defined literals: up to the '('
    limit = min(n, i + 256)
    while j < limit and s[j] not in "(;{}":
        j += 1
    return j


def _skip_trailing_return(s: str, i: int) -> int:
    """Skip a ``-> type`` run: identifiers, groups, pointer/reference punctuation."""
    n = len(s)
    while i < n:
        c = s[i]
        if c == "<":
            close = match_angle(s, i)
            i = n if close < 0 else close + 1
            continue
        if c == "(":
            close = match_paren(s, i)
            i = n if close < 0 else close + 1
            continue
        if c in "*&:.[]" or _is_ident_char(c) or c.isspace():
            i += 1
            continue
        break
    return i


def skip_post_signature_decorations(
    s: str,
    i: int,
    *,
    expression_bodied: bool = True,
    brace_initializers: bool = False,
) -> int | None:
    """Advance from just past ``)`` to the body ``{`` or the ``=>`` arrow.

    Returns the offset of the terminator, or None for a declaration (``;``),
    an unexpected token, or a scan that runs too long.  With
    *brace_initializers*, ``member{init}`` groups after a ``:`` introducer
    are skipped instead of being mistaken for the body.
    """
    n = len(s)
    limit = min(n, i + _MAX_DECORATION_CHARS)
    in_initializer = False
    prev_sig = ")"
    while i < limit:
        i = skip_whitespace(s, i)
        if i >= limit:
            break
        c = s[i]

        if c == "{":
            if in_initializer and brace_initializers and (_is_ident_char(prev_sig) or prev_sig == ">"):
                close = match_brace(s, i)
                if close < 0:
                    return None
                i = close + 1
                prev_sig = "}"
                continue
            return i

        if c == "=":
            if expression_bodied and s.startswith("=>", i):
                return i
            return None

        if c == ";":
            return None

        if s.startswith("::", i):
            i += 2
            prev_sig = ":"
            continue

        if c == ":":
            in_initializer = True
            i += 1
            prev_sig = c
            continue

        if s.startswith("->", i):
            i = _skip_trailing_return(s, i + 2)
            prev_sig = s[i - 1] if i > 0 else c
            continue

        if s.startswith("[[", i):
            end = s.find("]]", i + 2)
            i = n if end < 0 else end + 2
            prev_sig = "]"
            continue

        if c == "[":
            close = match_bracket(s, i)
            i = n if close < 0 else close + 1
            prev_sig = "]"
            continue

        if _is_ident_char(c):
            word_start = i
            while i < n and _is_ident_char(s[i]):
                i += 1
            if s[word_start:i] in _CONSTRAINT_WORDS:
                in_initializer = False
            prev_sig = s[i - 1]
            j = skip_whitespace(s, i)
            if j < n and s[j] == "(":
                # macro-like invocation (noexcept(...), __attribute__((...)), base(...))
                close = match_paren(s, j)
                i = n if close < 0 else close + 1
                prev_sig = ")"
            continue

        if c == "<":
            close = match_angle(s, i)
            i = n if close < 0 else close + 1
            prev_sig = ">"
            continue

        if c == "(":
            close = match_paren(s, i)
            i = n if close < 0 else close + 1
            prev_sig = ")"
            continue

        if c in _PASSTHROUGH_PUNCT:
            i += 1
            prev_sig = c
            continue

        # ')', '}', operators... the name was inside an expression
        return None

    return None


# ---------------------------------------------------------------------------
# Locator
# ---------------------------------------------------------------------------


def _form_function(
    view: FileView,
    name: str,
    name_idx: int,
    target: int,
    settings: Settings,
) -> ExtractionResult | None:
    s = view.cleaned_text
    n = len(s)
    i = name_idx + len(name)
    if name == "operator":
        i = skip_operator_token(s, i)
    i = skip_whitespace(s, i)

    if i < n and s[i] == "<":
        close = match_angle(s, i)
        if close < 0:
            return None
        i = skip_whitespace(s, close + 1)

    if i >= n or s[i] != "(":
        return None
    close_paren = match_paren(s, i)
    if close_paren < 0:
        return None

    j = skip_post_signature_decorations(
        s,
        close_paren + 1,
        expression_bodied=view.dialect.expression_bodied,
        brace_initializers=view.dialect.brace_initializers,
    )
    if j is None:
        return None

    target_line = view.line_of(target)

    if s.startswith("=>", j):
        semi = s.find(";", j + 2)
        if semi < 0:
            return None
        start = find_signature_start(view, name_idx, settings.header_max_lines)
        result = ExtractionResult.from_offsets(view, start, semi + 1, STRATEGY)
        if result.start_line - 1 <= target_line <= result.end_line + 1:
            return result
        return None

    close_brace = match_brace(s, j)
    if close_brace < 0:
        return None
    start = find_signature_start(view, name_idx, settings.header_max_lines)
    result = ExtractionResult.from_offsets(view, start, close_brace + 1, STRATEGY)
    if result.covers_line(target_line):
        return result
    # Stack lines often point just past the body (a trailing log call, an
    # inlined epilogue); accept when the name itself is close enough.
    if abs(target - name_idx) < settings.near_miss_chars:
        return result
    return None


def locate_by_name(
    view: FileView,
    function_name: str,
    target_offset: int,
    settings: Settings | None = None,
) -> ExtractionResult | None:
    """Find the definition of *function_name* nearest to *target_offset*."""
    name = (function_name or "").strip()
    if not name or not view.cleaned_text:
        return None
    if settings is None:
        settings = Settings()

    tried = 0
    for hit in iter_name_hits(
        view.cleaned_text,
        name,
        target_offset,
        settings.anchor_window_chars,
        settings.candidate_cutoff_chars,
    ):
        if not is_whole_identifier(view.cleaned_text, hit, name):
            continue
        tried += 1
        result = _form_function(view, name, hit, target_offset, settings)
        if result is not None:
            log.debug("%s: anchored %r at offset %d after %d candidate(s)", view.path, name, hit, tried)
            return result
    log.debug("%s: no anchor for %r (%d candidate(s))", view.path, name, tried)
    return None
