"""Context assembly, prompting and citation parsing."""

from src.generation.citations import extract_citations
from src.generation.context import ContextAssembler
from src.generation.prompt import USED_SECTIONS_MARKER, build_prompt

__all__ = [
    "ContextAssembler",
    "USED_SECTIONS_MARKER",
    "build_prompt",
    "extract_citations",
]
