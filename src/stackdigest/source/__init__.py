"""Locate and render the function behind a stack frame's source location."""

from stackdigest.source.extractor import (
    ExtractionOutcome,
    extract_frame_source,
    extract_from_view,
    extract_function_source,
    locate_function,
)
from stackdigest.source.fileview import FileView, FileViewCache, clear_cache, get_file_view
from stackdigest.source.result import ExtractionResult
from stackdigest.source.sanitize import sanitize

__all__ = [
    "ExtractionOutcome",
    "ExtractionResult",
    "FileView",
    "FileViewCache",
    "clear_cache",
    "extract_frame_source",
    "extract_from_view",
    "extract_function_source",
    "get_file_view",
    "locate_function",
    "sanitize",
]
