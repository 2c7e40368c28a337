"""Call-stack text parsing and frame symbols."""

from stackdigest.callstack.frames import CallStackFrame
from stackdigest.callstack.parser import parse_callstack, read_callstack
from stackdigest.callstack.symbols import anchor_name, extract_function_name, strip_templates

__all__ = [
    "CallStackFrame",
    "anchor_name",
    "extract_function_name",
    "parse_callstack",
    "read_callstack",
    "strip_templates",
]
