"""Data models for the Web Page Q&A application."""

from src.models.answer import AssembledContext, ChatAnswer, IngestResult
from src.models.chunk import Chunk, Document
from src.models.page import ScrapedPage
from src.models.vector import ChunkMetadata, IndexedVector, Match, StoreStats

__all__ = [
    "AssembledContext",
    "ChatAnswer",
    "Chunk",
    "ChunkMetadata",
    "Document",
    "IndexedVector",
    "IngestResult",
    "Match",
    "ScrapedPage",
    "StoreStats",
]
