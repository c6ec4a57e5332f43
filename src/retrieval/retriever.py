"""Nearest-neighbour retrieval of chunks for a question."""

import logging

from src.errors import ValidationError
from src.models.vector import Match
from src.providers.base import Embedder
from src.storage.vector_store import VectorStore

logger = logging.getLogger(__name__)


class Retriever:
    """Embeds a query and asks the vector store for its nearest chunks.

    Matches are returned exactly as the store scored them. Relevance
    filtering is a separate step (see ``ContextAssembler``).
    """

    def __init__(self, embedder: Embedder, store: VectorStore) -> None:
        self._embedder = embedder
        self._store = store

    async def retrieve(self, query: str, top_k: int = 10) -> list[Match]:
        """Find the chunks closest to a query across the whole store.

        Args:
            query: Natural-language question.
            top_k: Number of candidates to request.

        Returns:
            Matches in descending score order.

        Raises:
            ValidationError: If query is blank or top_k is not positive.
        """
        if not query or not query.strip():
            raise ValidationError("Query cannot be empty")
        if top_k <= 0:
            raise ValidationError(f"top_k must be positive, got {top_k}")

        vector = await self._embedder.embed(query)
        matches = await self._store.query(vector, top_k)

        logger.info(
            "Retrieved %d candidates (best score %s)",
            len(matches),
            f"{matches[0].score:.3f}" if matches else "n/a",
        )
        return matches
