"""Balanced-delimiter matching over cleaned text.

Every matcher takes the offset of an opening delimiter and returns the offset
of its depth-matched partner, or -1 when the region is not closed.  They are
only meaningful on sanitized text, where literal and comment contents can no
longer unbalance the count.
"""

from __future__ import annotations

# Characters that cannot appear at the top level of a template/generic
# argument list; hitting one means the ``<`` was a comparison.
_ANGLE_STOPS = frozenset(";{}")


def find_matching(s: str, open_idx: int, opener: str, closer: str) -> int:
    if not 0 <= open_idx < len(s) or s[open_idx] != opener:
        return -1
    depth = 0
    for i in range(open_idx, len(s)):
        c = s[i]
        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def match_brace(s: str, open_idx: int) -> int:
    return find_matching(s, open_idx, "{", "}")


def match_paren(s: str, open_idx: int) -> int:
    return find_matching(s, open_idx, "(", ")")


def match_bracket(s: str, open_idx: int) -> int:
    return find_matching(s, open_idx, "[", "]")


def match_angle(s: str, open_idx: int) -> int:
    """Rough ``<...>`` matching for template and generic argument lists.

    Parenthesized groups are skipped whole (``Foo<decltype(a > b)>``), the
    ``>`` of ``->`` is ignored, and a ``;``/``{``/``}`` before the close
    means there was no argument list at all.
    """
    depth = 0
    i = open_idx
    n = len(s)
    while i < n:
        c = s[i]
        if c == "<":
            depth += 1
        elif c == ">":
            if i > 0 and s[i - 1] == "-":
                i += 1
                continue
            depth -= 1
            if depth == 0:
                return i
        elif c == "(":
            close = match_paren(s, i)
            if close < 0:
                return -1
            i = close
        elif c in _ANGLE_STOPS:
            return -1
        i += 1
    return -1


def match_brace_backward(s: str, close_idx: int, floor: int = 0) -> int:
    """Find the ``{`` that pairs with the ``}`` at *close_idx*, scanning left."""
    depth = 0
    for i in range(close_idx, max(floor, 0) - 1, -1):
        c = s[i]
        if c == "}":
            depth += 1
        elif c == "{":
            depth -= 1
            if depth == 0:
                return i
    return -1


def skip_whitespace(s: str, i: int) -> int:
    n = len(s)
    while i < n and s[i].isspace():
        i += 1
    return i
