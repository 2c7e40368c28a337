"""Prompt templates and prompt assembly."""

from stackdigest.prompt.builder import assemble_prompt, build_prompt, collect_frame_sources
from stackdigest.prompt.templates import DEFAULT_TEMPLATES, MODES, TemplateStore

__all__ = [
    "DEFAULT_TEMPLATES",
    "MODES",
    "TemplateStore",
    "assemble_prompt",
    "build_prompt",
    "collect_frame_sources",
]
