"""Tests for FileView construction, line arithmetic and the view cache."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from stackdigest.source.fileview import (
    FileView,
    FileViewCache,
    compute_line_starts,
    decode_source,
    default_cache,
    get_file_view,
    read_file_view,
)


class TestLineTable:
    def test_compute_line_starts(self):
        assert compute_line_starts("") == (0,)
        assert compute_line_starts("a\nb\n") == (0, 2, 4)

    def test_line_of_and_offset_of_line(self):
        view = FileView.from_text("ab\ncd\nef", path="x.cpp")
        assert view.line_count == 3
        assert view.line_of(0) == 1
        assert view.line_of(3) == 2
        assert view.line_of(7) == 3
        assert view.offset_of_line(2) == 3
        assert view.offset_of_line(0) == 0

    def test_offset_past_end_clamps_to_last_char(self):
        view = FileView.from_text("ab\ncd", path="x.cpp")
        assert view.offset_of_line(99) == 4

    def test_line_text_strips_terminators(self):
        view = FileView.from_text("one\r\ntwo\nthree", path="x.cpp")
        assert view.line_text(1) == "one"
        assert view.line_text(2) == "two"
        assert view.line_text(3) == "three"
        assert view.line_text(4) == ""
        assert view.lines() == ["one", "two", "three"]

    def test_cleaned_text_is_aligned(self):
        text = 'int a; // {\nconst char* s = "}";\n'
        view = FileView.from_text(text, path="x.cpp")
        assert len(view.cleaned_text) == len(view.raw_text)
        assert "{" not in view.cleaned_text and "}" not in view.cleaned_text


class TestDialectSelection:
    @pytest.mark.parametrize(
        "path,expected",
        [("a.cpp", "cpp"), ("a.H", "cpp"), ("a.c", "c"), ("a.cs", "c_sharp"), ("a.txt", "unknown"), ("", "unknown")],
    )
    def test_dialect_follows_extension(self, path, expected):
        assert FileView.from_text("", path=path).dialect.name == expected


class TestDecode:
    def test_utf8_bom_is_dropped(self):
        assert decode_source(b"\xef\xbb\xbfint x;") == "int x;"

    def test_utf16_bom(self):
        assert decode_source("void f();".encode("utf-16")) == "void f();"

    def test_plain_utf8(self):
        assert decode_source("// héllo".encode("utf-8")) == "// héllo"

    def test_undecodable_bytes_are_replaced(self):
        assert decode_source(b"// caf\xe9") == "// caf\ufffd"


class TestCache:
    def test_get_or_build_reuses_views(self, tmp_path):
        path = tmp_path / "a.cpp"
        path.write_text("void f() {}\n", encoding="utf-8")
        cache = FileViewCache()
        first = cache.get_or_build(str(path))
        second = cache.get_or_build(str(path))
        assert first is second
        assert str(path) in cache
        assert len(cache) == 1
        assert cache.get(str(path)) is first

    def test_views_are_not_refreshed_until_cleared(self, tmp_path):
        path = tmp_path / "a.cpp"
        path.write_text("old\n", encoding="utf-8")
        cache = FileViewCache()
        assert cache.get_or_build(str(path)).raw_text == "old\n"
        path.write_text("new\n", encoding="utf-8")
        assert cache.get_or_build(str(path)).raw_text == "old\n"
        cache.clear()
        assert cache.get_or_build(str(path)).raw_text == "new\n"

    def test_missing_file_raises_and_is_not_cached(self, tmp_path):
        cache = FileViewCache()
        with pytest.raises(OSError):
            cache.get_or_build(str(tmp_path / "missing.cpp"))
        assert len(cache) == 0

    def test_default_cache_helpers(self, tmp_path):
        path = tmp_path / "b.cs"
        path.write_text("class B {}\n", encoding="utf-8")
        view = get_file_view(str(path))
        assert view.dialect.name == "c_sharp"
        assert str(path) in default_cache()

    def test_read_file_view(self, tmp_path):
        path = tmp_path / "c.cpp"
        path.write_bytes(b"\xef\xbb\xbfint c;\n")
        view = read_file_view(str(path))
        assert view.raw_text == "int c;\n"
        assert view.path == str(path)

    def test_concurrent_builds_agree(self, tmp_path):
        path = tmp_path / "big.cpp"
        path.write_text("void F() { /* { */ }\n" * 500, encoding="utf-8")
        built = [FileView.from_text(path.read_text(encoding="utf-8"), path=str(path)) for _ in range(2)]
        assert built[0] == built[1]

        cache = FileViewCache()
        with ThreadPoolExecutor(max_workers=8) as pool:
            views = list(pool.map(lambda _: cache.get_or_build(str(path)), range(16)))
        assert len(cache) == 1
        assert all(v.cleaned_text == views[0].cleaned_text for v in views)
        assert all(v.line_starts == views[0].line_starts for v in views)
