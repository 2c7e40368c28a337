from __future__ import annotations

from dataclasses import dataclass

from stackdigest.source.fileview import FileView


@dataclass(frozen=True)
class ExtractionResult:
    """A located function: half-open ``[start, end)`` into the raw text.

    ``start_line``/``end_line`` are the inclusive 1-based lines of that range
    and ``strategy`` names the locator that produced it.
    """

    start: int
    end: int
    start_line: int
    end_line: int
    strategy: str

    @classmethod
    def from_offsets(cls, view: FileView, start: int, end: int, strategy: str) -> "ExtractionResult":
        end = max(start, min(len(view.raw_text), end))
        return cls(
            start=start,
            end=end,
            start_line=view.line_of(start),
            end_line=view.line_of(max(start, end - 1)),
            strategy=strategy,
        )

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def covers_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "strategy": self.strategy,
        }
