"""Short-name derivation from the full symbols debuggers print."""

from __future__ import annotations

import re

_OFFSET_SUFFIX_RE = re.compile(r"\s*\+\s*0x[0-9a-fA-F]+\s*$")
_OPERATOR_RE = re.compile(r"\boperator\b\s*(\(\s*\)|\[\s*\]|[-+*/%^&|~!=<>,]+|(?:new|delete)(?:\s*\[\s*\])?|[^(]*)")
_ARITY_RE = re.compile(r"`\d+")
_MANAGED_CTORS = ("..ctor", "..cctor")
_OPERATOR_WORD_RE = re.compile(r"^operator\b")


def strip_templates(s: str) -> str:
    """Remove nested ``<...>`` argument lists; a stray ``>`` is dropped."""
    out = []
    depth = 0
    for c in s:
        if c == "<":
            depth += 1
            continue
        if c == ">":
            if depth > 0:
                depth -= 1
            continue
        if depth == 0:
            out.append(c)
    return "".join(out)


def _operator_name(symbol: str) -> str | None:
    m = _OPERATOR_RE.search(symbol)
    if m is None:
        return None
    token = " ".join(m.group(1).split())
    if not token:
        return "operator"
    if token[0].isalpha() or token[0] == "_":
        return f"operator {strip_templates(token).strip()}"
    return "operator" + token.replace(" ", "")


def extract_function_name(symbol: str) -> str:
    """Display-friendly function name for a full symbol.

    ``UE::Net::FFoo<int>::Bar(int) const`` -> ``Bar``,
    ``Game.Player.get_Health()`` -> ``get_Health``,
    ``Game.Player..ctor`` -> ``Player``,
    ``std::operator<<(...)`` -> ``operator<<``.
    """
    if not symbol or not symbol.strip():
        return symbol
    name = _OFFSET_SUFFIX_RE.sub("", symbol)

    op = _operator_name(name)
    if op is not None:
        return op

    paren = name.find("(")
    if paren >= 0:
        name = name[:paren]
    name = _ARITY_RE.sub("", strip_templates(name)).strip()

    scope = name.rfind("::")
    if scope >= 0 and scope < len(name) - 2:
        return name[scope + 2 :].strip()
    if scope < 0 and "." in name:
        for ctor in _MANAGED_CTORS:
            if name.endswith(ctor):
                type_path = name[: -len(ctor)]
                return type_path.rsplit(".", 1)[-1].strip()
        tail = name.rsplit(".", 1)[-1].strip()
        if tail:
            return tail
    return name.strip()


def anchor_name(name: str) -> str:
    """Name to search for in source: every operator overload anchors on ``operator``."""
    name = (name or "").strip()
    if _OPERATOR_WORD_RE.match(name):
        return "operator"
    return name
