"""Tests for the upward signature backtracker."""

from __future__ import annotations

import pytest
from conftest import view_of

from stackdigest.source.signature import (
    continues_signature,
    find_signature_start,
    is_boundary,
    opens_initializer_list,
)


def _start_line(text: str, needle: str, max_lines: int = 30) -> int:
    view = view_of(text)
    return view.line_of(find_signature_start(view, text.index(needle), max_lines))


class TestPredicates:
    @pytest.mark.parametrize("line", ["", "#include <x>", "int a = 1;", "#if WITH_EDITOR"])
    def test_boundaries(self, line):
        assert is_boundary(line)

    @pytest.mark.parametrize(
        "line",
        [
            "[Obsolete]",
            "template <typename T>",
            "UE_NODISCARD",
            "__declspec(dllexport)",
            "[[nodiscard]] static",
            "void Foo(int a,",
            "void Foo(",
            "    Bar(x), Baz(y,",
            "int Get() const",
            "Foo::Foo(int w) : Base(w)",
        ],
    )
    def test_continuations(self, line):
        assert continues_signature(line.strip())

    def test_plain_statement_is_not_a_continuation(self):
        assert not continues_signature("return x")
        assert not continues_signature("}")

    @pytest.mark.parametrize(
        "line",
        ["int One() { return 1; }", "IMPLEMENT_MODULE(FFoo, Foo)", "    int b)", "Foo::Foo(int w)"],
    )
    def test_closed_parentheses_are_not_continuations(self, line):
        assert not continues_signature(line.strip())

    def test_initializer_list_opener(self):
        assert opens_initializer_list(": Base(w)")
        assert not opens_initializer_list("::GlobalFn()")
        assert not opens_initializer_list("Foo(int w)")


class TestFindSignatureStart:
    def test_single_line_signature(self):
        text = "int x;\nvoid Foo()\n{\n}\n"
        assert _start_line(text, "Foo") == 2

    def test_template_line_is_merged(self):
        text = "int x;\ntemplate <typename T>\nvoid Foo(T t)\n{\n}\n"
        assert _start_line(text, "Foo") == 2

    def test_export_macro_is_merged(self):
        text = "\nUE_NODISCARD\nint Foo()\n{\n}\n"
        assert _start_line(text, "Foo") == 2

    def test_wrapped_parameters_are_merged(self):
        text = "int y;\nvoid Foo(int a,\n         int b)\n{\n}\n"
        assert _start_line(text, "int b") == 2

    def test_attribute_line_is_merged(self):
        text = "    }\n\n    [Obsolete]\n    public void Run()\n    {\n    }\n"
        assert _start_line(text, "Run") == 3

    def test_stops_at_blank_line(self):
        text = "[Obsolete]\n\nvoid Foo()\n{\n}\n"
        assert _start_line(text, "Foo") == 3

    def test_stops_at_preprocessor_line(self):
        text = "#if WITH_EDITOR\nvoid Foo()\n{\n}\n"
        assert _start_line(text, "Foo") == 2

    def test_max_lines_caps_the_walk(self):
        text = "template <typename A>\ntemplate <typename B>\ntemplate <typename C>\nvoid Foo()\n{\n}\n"
        assert _start_line(text, "Foo") == 1
        assert _start_line(text, "Foo", max_lines=1) == 3

    def test_wrapped_parameters_with_open_first_line(self):
        text = "int y;\nvoid Foo(\n    int a,\n    int b)\n{\n}\n"
        assert _start_line(text, "int b") == 2

    def test_adjacent_one_liner_is_not_merged(self):
        text = "int One() { return 1; }\nint Two()\n{\n    return 2;\n}\n"
        assert _start_line(text, "Two") == 2

    def test_macro_invocation_line_is_not_merged(self):
        text = "IMPLEMENT_MODULE(FFoo, Foo)\nvoid Bar()\n{\n}\n"
        assert _start_line(text, "Bar") == 2

    def test_initializer_list_pulls_in_constructor_line(self):
        text = "int x;\nFoo::Foo(int w)\n    : Base(w)\n{\n}\n"
        assert _start_line(text, ": Base") == 2

    def test_multiline_initializer_list(self):
        text = "int x;\nFoo::Foo(int w)\n    : Base(w),\n      Width(w)\n{\n}\n"
        assert _start_line(text, "Width") == 2
