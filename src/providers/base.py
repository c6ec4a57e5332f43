"""Embedding and chat-completion provider contracts."""

from typing import Protocol


class Embedder(Protocol):
    """Turns text into embedding vectors.

    Raises ``src.errors.EmbeddingError`` when no vector is produced.
    """

    async def embed(self, text: str) -> list[float]: ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]: ...


class Completer(Protocol):
    """Generates a free-text answer for a prompt.

    Raises ``src.errors.CompletionError`` on an empty response.
    """

    async def complete(self, prompt: str) -> str: ...
