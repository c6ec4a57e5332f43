"""Chunk and document data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A bounded slice of a document's text, the unit of embedding."""

    model_config = ConfigDict(frozen=True)

    text: str
    index: int  # 0-based position within the document
    source_url: str


class Document(BaseModel):
    """A web page split into ordered chunks, produced once per ingest."""

    source_url: str
    title: str
    full_text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    chunks: list[Chunk] = Field(default_factory=list)

    @property
    def chunk_texts(self) -> list[str]:
        return [chunk.text for chunk in self.chunks]
