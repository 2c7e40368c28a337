"""Layout-preserving removal of comments and literals.

``sanitize()`` returns a string of exactly the same length as its input in
which every character inside a comment, string literal, character literal or
raw/verbatim string has been replaced by a space.  Newlines always survive,
so offsets and line numbers computed on either text agree.  The cleaned text
is what the locators scan for braces, parens and names.

Malformed input never raises: an unterminated literal or comment simply runs
to the end of the file.
"""

from __future__ import annotations

from stackdigest.languages.base import Dialect
from stackdigest.languages.registry import UNKNOWN_DIALECT

# C++ raw string delimiters are at most 16 chars and may not contain these.
_MAX_RAW_DELIMITER = 16
_BAD_DELIMITER_CHARS = frozenset(' ()\\\t\v\f\r\n"')
_RAW_ENCODING_PREFIXES = ("u8", "u", "U", "L")


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _blank(out: list[str], start: int, end: int) -> None:
    """Replace out[start:end] with spaces, keeping newlines."""
    for k in range(start, end):
        if out[k] != "\n":
            out[k] = " "


# ---------------------------------------------------------------------------
# Literal scanners: each returns the end offset (exclusive) of the literal
# ---------------------------------------------------------------------------


def _scan_quoted(s: str, i: int, quote: str) -> int:
    """Ordinary "..." or '...' with backslash escapes; *i* is the opener."""
    n = len(s)
    j = i + 1
    while j < n:
        ch = s[j]
        if ch == "\\":
            j += 2
            continue
        if ch == quote:
            return j + 1
        j += 1
    return n


def _scan_verbatim(s: str, j: int) -> int:
    """Body of @"..." starting just after the opening quote."""
    n = len(s)
    while j < n:
        if s[j] == '"':
            if j + 1 < n and s[j + 1] == '"':
                j += 2
                continue
            return j + 1
        j += 1
    return n


def _quote_run(s: str, i: int) -> int:
    j = i
    while j < len(s) and s[j] == '"':
        j += 1
    return j - i


def _scan_triple_quoted(s: str, i: int) -> int:
    """C# raw literal opened by a run of 3+ quotes at *i*."""
    n = len(s)
    width = _quote_run(s, i)
    j = i + width
    while j < n:
        if s[j] == '"':
            run = _quote_run(s, j)
            if run >= width:
                return j + run
            j += run
            continue
        j += 1
    return n


def _scan_delimited_raw(s: str, i: int) -> int | None:
    """C++ R"delim( ... )delim" with *i* at the ``R``.

    Returns None when the text after ``R"`` is not a valid raw-string opener,
    in which case the quote is handled as an ordinary string.
    """
    delim_start = i + 2
    paren = s.find("(", delim_start, delim_start + _MAX_RAW_DELIMITER + 1)
    if paren < 0:
        return None
    delim = s[delim_start:paren]
    if any(ch in _BAD_DELIMITER_CHARS for ch in delim):
        return None
    closer = ")" + delim + '"'
    close = s.find(closer, paren + 1)
    if close < 0:
        return len(s)
    return close + len(closer)


def _raw_prefix_ok(s: str, i: int) -> bool:
    """True when the ``R`` at *i* starts a raw literal, not an identifier tail."""
    if i == 0 or not _is_ident_char(s[i - 1]):
        return True
    for prefix in _RAW_ENCODING_PREFIXES:
        start = i - len(prefix)
        if start >= 0 and s[start:i] == prefix and (start == 0 or not _is_ident_char(s[start - 1])):
            return True
    return False


def _verbatim_opener_len(s: str, i: int) -> int:
    """Length of a verbatim opener (@", $@", @$") at *i*, or 0."""
    if s.startswith('@"', i):
        return 2
    if s.startswith('$@"', i) or s.startswith('@$"', i):
        return 3
    return 0


def _is_digit_separator(s: str, i: int) -> bool:
    """C++14 ``1'000'000``: a quote inside a numeric literal."""
    if i == 0 or i + 1 >= len(s):
        return False
    if not _is_ident_char(s[i - 1]) or not s[i + 1].isalnum():
        return False
    j = i - 1
    while j >= 0 and (s[j].isalnum() or s[j] in "_'."):
        j -= 1
    return s[j + 1].isdigit()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def sanitize(text: str, dialect: Dialect | None = None) -> str:
    """Blank comments and literals in *text*, preserving length and newlines."""
    if dialect is None:
        dialect = UNKNOWN_DIALECT
    out = list(text)
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if c == "/" and nxt == "/":
            end = text.find("\n", i)
            end = n if end < 0 else end
            _blank(out, i, end)
            i = end
            continue

        if c == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end < 0 else end + 2
            _blank(out, i, end)
            i = end
            continue

        if dialect.verbatim_strings and c in "@$":
            opener = _verbatim_opener_len(text, i)
            if opener:
                end = _scan_verbatim(text, i + opener)
                _blank(out, i, end)
                i = end
                continue

        if dialect.triple_quote_raw and c == '"' and text.startswith('"""', i):
            end = _scan_triple_quoted(text, i)
            _blank(out, i, end)
            i = end
            continue

        if dialect.delimiter_raw and c == "R" and nxt == '"' and _raw_prefix_ok(text, i):
            end = _scan_delimited_raw(text, i)
            if end is not None:
                _blank(out, i, end)
                i = end
                continue

        if c == '"':
            end = _scan_quoted(text, i, '"')
            _blank(out, i, end)
            i = end
            continue

        if c == "'" and not _is_digit_separator(text, i):
            end = _scan_quoted(text, i, "'")
            _blank(out, i, end)
            i = end
            continue

        i += 1

    return "".join(out)
