"""Dialect detection from file extensions."""

from __future__ import annotations

import os

from stackdigest.languages.base import Dialect

# Single source of truth for extension -> language.
_EXTENSION_MAP: dict[str, str] = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".c++": "cpp",
    ".h": "cpp",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".inl": "cpp",
    ".ipp": "cpp",
    ".tpp": "cpp",
    ".cs": "c_sharp",
}

_DIALECTS: dict[str, Dialect] = {
    "c": Dialect("c", brace_initializers=True),
    "cpp": Dialect("cpp", delimiter_raw=True, brace_initializers=True),
    "c_sharp": Dialect(
        "c_sharp",
        expression_bodied=True,
        verbatim_strings=True,
        triple_quote_raw=True,
    ),
    "unknown": Dialect(
        "unknown",
        verbatim_strings=True,
        triple_quote_raw=True,
        delimiter_raw=True,
        brace_initializers=True,
    ),
}

UNKNOWN_DIALECT = _DIALECTS["unknown"]


def get_language_for_file(path: str) -> str | None:
    """Determine the language for a file based on its extension.

    Returns the language name string, or None if unsupported.
    """
    _, ext = os.path.splitext(path or "")
    return _EXTENSION_MAP.get(ext.lower())


def get_dialect(language: str | None) -> Dialect:
    """Return the dialect for *language*, falling back to ``unknown``."""
    if not language:
        return UNKNOWN_DIALECT
    return _DIALECTS.get(language, UNKNOWN_DIALECT)


def dialect_for_path(path: str) -> Dialect:
    return get_dialect(get_language_for_file(path))


def supported_extensions() -> list[str]:
    return sorted(_EXTENSION_MAP)
