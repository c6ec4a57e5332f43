"""Word-boundary text chunker for scraped web pages."""

import logging
from datetime import datetime

from src.config import ChunkingConfig
from src.models.chunk import Chunk, Document

logger = logging.getLogger(__name__)


def _last_whitespace(text: str, start: int, end: int) -> int | None:
    """Return the index of the last whitespace in ``text[start+1:end+1]``."""
    for pos in range(end, start, -1):
        if text[pos].isspace():
            return pos
    return None


def _next_whitespace(text: str, pos: int) -> int:
    """Return the index of the first whitespace at or after ``pos``."""
    length = len(text)
    while pos < length and not text[pos].isspace():
        pos += 1
    return pos


def chunk_text(text: str, size: int = 1000) -> list[str]:
    """Split text into non-overlapping chunks of at most ``size`` characters.

    Each window is cut at the last whitespace at or before ``start + size``
    so no word is split. A window with no whitespace at all is extended to
    the next whitespace instead, so a single word longer than ``size``
    becomes its own oversized chunk. Pieces are trimmed and empty pieces
    are dropped.

    Args:
        text: Cleaned document text.
        size: Maximum chunk length in characters.

    Returns:
        Ordered list of chunk strings.

    Raises:
        ValueError: If size is not positive.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")

    chunks: list[str] = []
    length = len(text)
    start = 0

    while start < length:
        end = start + size
        if end < length:
            cut = _last_whitespace(text, start, end)
            end = cut if cut is not None else _next_whitespace(text, end)

        piece = text[start:end].strip()
        if piece:
            chunks.append(piece)

        start = end + 1

    return chunks


class TextChunker:
    """Turns cleaned page text into a Document of numbered chunks.

    Args:
        config: ChunkingConfig with the chunk_size setting.
    """

    def __init__(self, config: ChunkingConfig) -> None:
        self._config = config

    def chunk(self, text: str) -> list[str]:
        return chunk_text(text, self._config.chunk_size)

    def build_document(
        self,
        url: str,
        title: str,
        text: str,
        timestamp: datetime | None = None,
    ) -> Document:
        """Chunk page text and wrap it in a Document.

        Args:
            url: Source URL of the page.
            title: Page title.
            text: Cleaned page text.
            timestamp: Fetch time; defaults to now.

        Returns:
            A Document whose chunks are indexed contiguously from 0.
        """
        chunks = [
            Chunk(text=piece, index=i, source_url=url)
            for i, piece in enumerate(self.chunk(text))
        ]
        logger.info("Split %s into %d chunks", url, len(chunks))

        return Document(
            source_url=url,
            title=title,
            full_text=text,
            timestamp=timestamp or datetime.now(),
            chunks=chunks,
        )
