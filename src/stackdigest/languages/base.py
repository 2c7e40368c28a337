from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Dialect:
    """Structural rules that apply to one family of C-like source files.

    The flags gate which literal forms the sanitizer recognizes and which
    member shapes the locators accept.  ``unknown`` turns every literal form
    on so that files with unexpected extensions still get a safe cleaned view.
    """

    name: str
    # C# `int Foo() => 42;` members and `get => _x;` accessors
    expression_bodied: bool = False
    # C# @"..." (and $@"..." / @$"...") with "" as an escaped quote
    verbatim_strings: bool = False
    # C# 11 """...""" raw literals, closed by a run of the same length
    triple_quote_raw: bool = False
    # C++11 R"delim(...)delim" raw literals
    delimiter_raw: bool = False
    # C++ `: member{init}` brace initializers inside constructor init lists
    brace_initializers: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "expression_bodied": self.expression_bodied,
            "verbatim_strings": self.verbatim_strings,
            "triple_quote_raw": self.triple_quote_raw,
            "delimiter_raw": self.delimiter_raw,
            "brace_initializers": self.brace_initializers,
        }
