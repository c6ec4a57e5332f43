"""ChromaDB-backed vector store."""

import asyncio
import logging
from pathlib import Path
from typing import Any

import chromadb

from src.errors import StoreError
from src.models.vector import IndexedVector, Match, StoreStats

logger = logging.getLogger(__name__)


class ChromaVectorStore:
    """Stores chunk vectors in a single persistent Chroma collection.

    The collection uses cosine space, so a Chroma distance ``d`` maps to a
    similarity score ``1 - d`` in [-1, 1]. The Chroma client is
    synchronous; every call runs in a worker thread.

    Args:
        chroma_dir: Directory for the persistent database.
        collection_name: Collection holding all chunk vectors.
        client: Optional pre-built Chroma client (used by tests).
    """

    def __init__(
        self,
        chroma_dir: str | Path,
        collection_name: str,
        client: Any | None = None,
    ) -> None:
        if client is None:
            Path(chroma_dir).mkdir(parents=True, exist_ok=True)
            client = chromadb.PersistentClient(path=str(chroma_dir))
        self._client = client
        self._collection_name = collection_name
        self._collection = client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    async def upsert(self, vectors: list[IndexedVector]) -> None:
        if not vectors:
            return
        try:
            await asyncio.to_thread(
                self._collection.upsert,
                ids=[v.id for v in vectors],
                embeddings=[v.embedding for v in vectors],
                metadatas=[v.metadata.to_store() for v in vectors],
                documents=[v.metadata.content for v in vectors],
            )
        except Exception as exc:
            raise StoreError(f"Failed to upsert {len(vectors)} vectors: {exc}") from exc

    async def query(self, vector: list[float], top_k: int) -> list[Match]:
        """Return up to top_k nearest chunks, best first.

        Args:
            vector: Query embedding.
            top_k: Maximum number of matches.

        Returns:
            Matches with metadata, ordered by descending score.
        """
        try:
            count = await asyncio.to_thread(self._collection.count)
            if count == 0:
                return []
            result = await asyncio.to_thread(
                self._collection.query,
                query_embeddings=[vector],
                n_results=min(top_k, count),
                include=["metadatas", "distances"],
            )
        except Exception as exc:
            raise StoreError(f"Vector search failed: {exc}") from exc

        ids = result["ids"][0]
        distances = (result.get("distances") or [[]])[0]
        metadatas = (result.get("metadatas") or [[]])[0]

        matches = [
            Match(
                id=vid,
                score=1.0 - float(distance),
                metadata=dict(metadata or {}),
            )
            for vid, distance, metadata in zip(ids, distances, metadatas)
        ]
        logger.debug("Query returned %d matches", len(matches))
        return matches

    async def delete_by_ids(self, ids: list[str]) -> None:
        if not ids:
            return
        try:
            await asyncio.to_thread(self._collection.delete, ids=ids)
        except Exception as exc:
            raise StoreError(f"Failed to delete {len(ids)} vectors: {exc}") from exc

    async def stats(self) -> StoreStats:
        try:
            count = await asyncio.to_thread(self._collection.count)
            dimension = None
            if count:
                peek = await asyncio.to_thread(self._collection.peek, 1)
                embeddings = peek.get("embeddings")
                if embeddings is not None and len(embeddings) > 0:
                    dimension = len(embeddings[0])
        except Exception as exc:
            raise StoreError(f"Failed to read index stats: {exc}") from exc

        return StoreStats(
            total_count=count,
            dimension=dimension,
            namespaces={self._collection_name: count},
        )
