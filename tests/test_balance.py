"""Tests for balanced-delimiter matching."""

from __future__ import annotations

from stackdigest.source.balance import (
    find_matching,
    match_angle,
    match_brace,
    match_brace_backward,
    match_bracket,
    match_paren,
    skip_whitespace,
)


class TestForwardMatching:
    def test_nested_braces(self):
        s = "{ a { b } c }"
        assert match_brace(s, 0) == len(s) - 1
        assert match_brace(s, 4) == 8

    def test_parens_and_brackets(self):
        assert match_paren("f(a, (b), c)", 1) == 11
        assert match_bracket("x[y[0]]", 1) == 6

    def test_unclosed_returns_minus_one(self):
        assert match_brace("{ { }", 0) == -1
        assert match_paren("(a", 0) == -1

    def test_wrong_opener_returns_minus_one(self):
        assert match_brace("a{}", 0) == -1
        assert find_matching("{}", 5, "{", "}") == -1


class TestAngleMatching:
    def test_simple_template_arguments(self):
        s = "TArray<int32>"
        assert match_angle(s, s.index("<")) == len(s) - 1

    def test_nested_arguments(self):
        s = "TMap<FName, TArray<int>>"
        assert match_angle(s, 4) == len(s) - 1

    def test_parenthesized_comparison_is_skipped(self):
        s = "Foo<decltype(a > b)>(x)"
        assert match_angle(s, 3) == s.index(")>") + 1

    def test_arrow_is_not_a_closer(self):
        s = "A<B->c>"
        assert match_angle(s, 1) == 6

    def test_statement_boundary_means_comparison(self):
        assert match_angle("if (a < b; c > d)", 6) == -1
        assert match_angle("a < b { c > d }", 2) == -1


class TestBackward:
    def test_match_brace_backward(self):
        s = "{ { } x }"
        assert match_brace_backward(s, len(s) - 1) == 0
        assert match_brace_backward(s, 4) == 2

    def test_floor_limits_the_scan(self):
        s = "{ aaaa }"
        assert match_brace_backward(s, len(s) - 1, floor=2) == -1


def test_skip_whitespace():
    assert skip_whitespace("  \n\t x", 0) == 5
    assert skip_whitespace("abc", 1) == 1
    assert skip_whitespace("   ", 0) == 3
