"""Vector store record data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChunkMetadata(BaseModel):
    """Metadata stored alongside every chunk vector.

    Serialized with camelCase keys (``chunkIndex``, ``totalChunks``) so
    records stay readable by other clients of the same index. ``content``
    duplicates the chunk text so retrieval needs no separate fetch.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: str
    timestamp: str  # ISO-8601
    chunk_index: int = Field(alias="chunkIndex")
    total_chunks: int = Field(alias="totalChunks")
    content: str

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class IndexedVector(BaseModel):
    """One chunk ready to be written to the vector store."""

    id: str
    embedding: list[float]
    metadata: ChunkMetadata


class Match(BaseModel):
    """A single vector store query result.

    ``metadata`` is kept as a raw mapping: the store may hold records
    written by other tools, and source labelling must cope with them.
    """

    id: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)


class StoreStats(BaseModel):
    """Summary counters reported by the vector store."""

    total_count: int = 0
    dimension: int | None = None
    namespaces: dict[str, int] = Field(default_factory=dict)
