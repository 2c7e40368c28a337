"""Standardized CLI exit codes for stackdigest.

Exit code scheme:

    0  SUCCESS         -- command completed (function body located, prompt built)
    1  GENERAL_ERROR   -- unexpected failure, unwritable config, crash
    2  USAGE_ERROR     -- invalid arguments, bad flags, unknown command (Click default)
    3  NO_FRAMES       -- the call-stack text contained no parseable frame
    4  SOURCE_MISSING  -- the frame has no location, or its file cannot be read
    6  PARTIAL         -- only nearby lines could be shown (no function body found)

Scripts can tell "nothing to work with" (3, 4) from "best effort" (6).
"""

from __future__ import annotations

import click

# ---------------------------------------------------------------------------
# Exit code constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1
EXIT_USAGE: int = 2
EXIT_NO_FRAMES: int = 3
EXIT_SOURCE_MISSING: int = 4
EXIT_PARTIAL: int = 6

# ---------------------------------------------------------------------------
# Human-readable descriptions (used by `--help` epilogs and diagnostics)
# ---------------------------------------------------------------------------

DESCRIPTIONS: dict[int, str] = {
    EXIT_SUCCESS: "success",
    EXIT_ERROR: "unexpected error",
    EXIT_USAGE: "invalid usage (bad arguments or flags)",
    EXIT_NO_FRAMES: "no call-stack frames found in the input",
    EXIT_SOURCE_MISSING: "frame has no source location or the file is unavailable",
    EXIT_PARTIAL: "partial results (nearby lines instead of a function body)",
}

# ---------------------------------------------------------------------------
# Custom exceptions (caught by click's error handler)
# ---------------------------------------------------------------------------


class StackDigestError(click.ClickException):
    """Base class for stackdigest errors with exit codes."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        return self.message


class NoFramesError(StackDigestError):
    """Raised when the call-stack text yields no frames."""

    def __init__(self, message: str = "No call-stack frames found in the input."):
        super().__init__(message, EXIT_NO_FRAMES)


class SourceMissingError(StackDigestError):
    """Raised when a frame's source cannot be located or read."""

    def __init__(self, message: str = "Source not available for this frame."):
        super().__init__(message, EXIT_SOURCE_MISSING)

