"""Delete-then-upsert indexing of a page's chunks."""

import logging
from datetime import datetime

from src.config import IndexingConfig
from src.errors import StoreError, ValidationError
from src.models.vector import ChunkMetadata, IndexedVector
from src.storage.vector_ids import vector_id, vector_ids_for_url
from src.storage.vector_store import VectorStore

logger = logging.getLogger(__name__)


def _batches(items: list, size: int) -> list[list]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class Indexer:
    """Writes a page's chunks to the vector store, replacing older ones.

    Re-indexing is not transactional. Between the delete sweep and the
    last upsert batch a reader may see none or only part of a page's
    chunks. Two concurrent ingests of the same URL are last-writer-wins.

    Args:
        store: Target vector store.
        config: IndexingConfig with batch_size and max_chunk_slots.
    """

    def __init__(self, store: VectorStore, config: IndexingConfig) -> None:
        self._store = store
        self._config = config

    async def delete_source(self, url: str) -> None:
        """Delete every chunk id a page could occupy.

        Ids are re-derived for slots ``0 .. max_chunk_slots - 1`` and deleted
        in batches. Failures are logged and swallowed: this is cleanup, and
        missing ids are expected.

        Args:
            url: Source URL whose chunks should be removed.
        """
        ids = vector_ids_for_url(url, self._config.max_chunk_slots)
        for batch_no, batch in enumerate(_batches(ids, self._config.batch_size)):
            try:
                await self._store.delete_by_ids(batch)
            except StoreError as exc:
                logger.warning(
                    "Delete batch %d for %s failed: %s", batch_no, url, exc
                )
        logger.info("Cleared previous vectors for %s", url)

    async def reindex(
        self,
        url: str,
        chunks: list[str],
        embeddings: list[list[float]],
        title: str,
        timestamp: datetime | str,
    ) -> int:
        """Replace all indexed chunks of a page.

        Args:
            url: Source URL of the page.
            chunks: Chunk texts in document order.
            embeddings: One vector per chunk, same order.
            title: Page title stored in metadata.
            timestamp: Fetch time, stored as an ISO-8601 string.

        Returns:
            Number of chunks written.

        Raises:
            ValidationError: If chunks and embeddings differ in length, or
                the page has more chunks than the delete sweep can reach.
            StoreError: If any upsert batch fails. Earlier batches stay
                written; re-ingesting the page overwrites them.
        """
        if len(chunks) != len(embeddings):
            raise ValidationError(
                f"Got {len(chunks)} chunks but {len(embeddings)} embeddings"
            )
        if len(chunks) > self._config.max_chunk_slots:
            raise ValidationError(
                f"Page has {len(chunks)} chunks; at most "
                f"{self._config.max_chunk_slots} are supported"
            )

        # Must run before the upsert: deletion is keyed by index, so a
        # shrinking page would otherwise keep its stale tail.
        await self.delete_source(url)

        stamp = timestamp if isinstance(timestamp, str) else timestamp.isoformat()
        total = len(chunks)
        vectors = [
            IndexedVector(
                id=vector_id(url, i),
                embedding=embedding,
                metadata=ChunkMetadata(
                    url=url,
                    title=title,
                    timestamp=stamp,
                    chunk_index=i,
                    total_chunks=total,
                    content=text,
                ),
            )
            for i, (text, embedding) in enumerate(zip(chunks, embeddings))
        ]

        for batch_no, batch in enumerate(_batches(vectors, self._config.batch_size)):
            try:
                await self._store.upsert(batch)
            except StoreError as exc:
                raise StoreError(
                    f"Upsert batch {batch_no} for {url} failed: {exc}"
                ) from exc

        logger.info("Indexed %d chunks for %s", total, url)
        return total
