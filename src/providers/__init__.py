"""Embedding and completion providers."""

from src.providers.base import Completer, Embedder
from src.providers.gemini import GeminiCompleter, GeminiEmbedder, create_client

__all__ = [
    "Completer",
    "Embedder",
    "GeminiCompleter",
    "GeminiEmbedder",
    "create_client",
]
