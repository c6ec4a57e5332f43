"""Vector store contract used by the indexer and retriever."""

from typing import Protocol

from src.models.vector import IndexedVector, Match, StoreStats


class VectorStore(Protocol):
    """A similarity index keyed by string ids.

    Every method raises ``src.errors.StoreError`` on failure. Deleting an
    id that does not exist is not an error.
    """

    async def upsert(self, vectors: list[IndexedVector]) -> None: ...

    async def query(self, vector: list[float], top_k: int) -> list[Match]: ...

    async def delete_by_ids(self, ids: list[str]) -> None: ...

    async def stats(self) -> StoreStats: ...
