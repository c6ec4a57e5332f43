"""Vector indexing of page chunks."""

from src.indexing.indexer import Indexer

__all__ = ["Indexer"]
