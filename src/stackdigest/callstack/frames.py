from __future__ import annotations

import ntpath
from dataclasses import dataclass
from typing import Any

from stackdigest.callstack.symbols import extract_function_name


@dataclass
class CallStackFrame:
    """One parsed frame of a debugger call stack."""

    index: int
    module: str
    symbol: str
    is_inline: bool = False
    reported_line: int | None = None
    source_path: str | None = None  # from the "at <path>(<line>)" line
    source_line: int | None = None

    @property
    def short_function_name(self) -> str:
        return extract_function_name(self.symbol)

    @property
    def has_location(self) -> bool:
        return bool(self.source_path) and self.source_line is not None

    def location(self) -> str:
        if not self.has_location:
            return "(no file)"
        # ntpath.basename splits on both separators; stacks often come from Windows
        return f"{ntpath.basename(self.source_path)}:{self.source_line}"

    def describe(self) -> str:
        inline = "[Inline] " if self.is_inline else ""
        return f"{self.index:02d}  {inline}{self.module}!{self.short_function_name}  {self.location()}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "inline": self.is_inline,
            "module": self.module,
            "symbol": self.symbol,
            "function": self.short_function_name,
            "reported_line": self.reported_line,
            "source_path": self.source_path,
            "source_line": self.source_line,
        }
