"""Answer turn and ingest result data models."""

from pydantic import BaseModel, Field


class AssembledContext(BaseModel):
    """Numbered context handed to the chat model for one answer turn.

    ``section_map`` maps each section number (1..N) to a human-readable
    source label. It is never shared between turns.
    """

    context_text: str = ""
    section_map: dict[int, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.context_text.strip()


class ChatAnswer(BaseModel):
    """The terminal output of an answer turn."""

    response: str
    sources: list[str] = Field(default_factory=list)
    conversation_id: str


class IngestResult(BaseModel):
    """Summary of a completed ingest call."""

    url: str
    title: str
    chunks_processed: int
    vector_prefix: str  # base64 of the URL, shared by all chunk ids
