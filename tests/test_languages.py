"""Tests for dialect detection."""

from __future__ import annotations

import pytest

from stackdigest.languages import dialect_for_path, get_dialect, get_language_for_file, supported_extensions


@pytest.mark.parametrize(
    "path,language",
    [
        ("Writer.cpp", "cpp"),
        ("Writer.CPP", "cpp"),
        ("Types.h", "cpp"),
        ("impl.inl", "cpp"),
        ("main.c", "c"),
        ("Player.cs", "c_sharp"),
        ("C:\\Src\\Net\\Iris.hpp", "cpp"),
        ("notes.txt", None),
        ("Makefile", None),
        ("", None),
    ],
)
def test_language_for_file(path, language):
    assert get_language_for_file(path) == language


def test_unknown_language_falls_back():
    assert get_dialect(None).name == "unknown"
    assert get_dialect("cobol").name == "unknown"
    assert dialect_for_path("x.txt").name == "unknown"


def test_csharp_flags():
    cs = get_dialect("c_sharp")
    assert cs.name == "c_sharp"
    assert cs.expression_bodied and cs.verbatim_strings and cs.triple_quote_raw
    assert not cs.delimiter_raw and not cs.brace_initializers


def test_cpp_flags():
    cpp = dialect_for_path("a.cc")
    assert cpp.delimiter_raw and cpp.brace_initializers
    assert not cpp.expression_bodied and not cpp.verbatim_strings


def test_unknown_recognizes_every_literal_form():
    unknown = get_dialect(None)
    assert unknown.verbatim_strings and unknown.triple_quote_raw and unknown.delimiter_raw
    assert not unknown.expression_bodied


def test_supported_extensions_sorted():
    exts = supported_extensions()
    assert exts == sorted(exts)
    assert ".cs" in exts and ".cpp" in exts


def test_dialect_to_dict():
    data = get_dialect("cpp").to_dict()
    assert data["name"] == "cpp"
    assert data["delimiter_raw"] is True
