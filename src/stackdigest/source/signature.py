"""Walk upward from an anchor to the first line of a function's signature.

Both locators find a function by something in its middle (the name, or the
opening brace).  Signatures routinely span several lines: attributes,
``template<...>`` lines, export macros, wrapped parameter lists, trailing
qualifiers and constructor initializer lists.  The backtracker merges such
lines upward and stops at anything that ends a previous statement.
"""

from __future__ import annotations

import re

from stackdigest.source.fileview import FileView

_TEMPLATE_RE = re.compile(r"\btemplate\s*<")
_TRAILING_QUALIFIER_RE = re.compile(
    r"\b(const|noexcept|override|final|requires|volatile|where|async|unsafe|extern)\s*$"
)
# Export / attribute macros that sit on their own line above a signature
_DECORATOR_MARKERS = ("UE_", "__declspec", "__attribute__", "[[")

DEFAULT_MAX_LINES = 30


def _is_attribute_line(line: str) -> bool:
    return line.startswith("[")


def _is_template_line(line: str) -> bool:
    return bool(_TEMPLATE_RE.search(line))


def _has_decorator_marker(line: str) -> bool:
    return any(marker in line for marker in _DECORATOR_MARKERS)


def _is_wrapped_parameter_line(line: str) -> bool:
    return line.count("(") > line.count(")") or line.endswith(",")


def _ends_with_qualifier(line: str) -> bool:
    return bool(_TRAILING_QUALIFIER_RE.search(line))


def _is_initializer_line(line: str) -> bool:
    return line.endswith(":") or " : " in line


_CONTINUATION_RULES = (
    _is_attribute_line,
    _is_template_line,
    _has_decorator_marker,
    _is_wrapped_parameter_line,
    _ends_with_qualifier,
    _is_initializer_line,
)


def continues_signature(line: str) -> bool:
    """True if the trimmed *line* above a signature belongs to it."""
    return any(rule(line) for rule in _CONTINUATION_RULES)


def opens_initializer_list(line: str) -> bool:
    """True if the trimmed *line* starts a constructor initializer list."""
    return line.startswith(":") and not line.startswith("::")


def is_boundary(line: str) -> bool:
    """Lines the backtracker never crosses: blank, preprocessor, statement end."""
    return not line or line.startswith("#") or line.endswith(";")


def find_signature_start(view: FileView, anchor_offset: int, max_lines: int = DEFAULT_MAX_LINES) -> int:
    """Return the offset of the first line of the signature around *anchor_offset*."""
    line = view.line_of(anchor_offset)
    start = line
    while start > 1 and line - start < max_lines:
        prev = view.line_text(start - 1).strip()
        if is_boundary(prev):
            break
        if not continues_signature(prev) and not opens_initializer_list(view.line_text(start).strip()):
            break
        start -= 1
    return view.line_starts[start - 1]
