"""Ingest and answer flows wiring the RAG components together."""

import logging

from src.config import AppConfig
from src.conversation import resolve_conversation_id
from src.errors import ValidationError
from src.generation.citations import extract_citations
from src.generation.context import ContextAssembler
from src.generation.prompt import build_prompt
from src.indexing.indexer import Indexer
from src.ingestion.chunker import TextChunker
from src.ingestion.scraper import Scraper, WebScraper, is_valid_url
from src.models.answer import ChatAnswer, IngestResult
from src.models.chunk import Document
from src.models.vector import StoreStats
from src.providers.base import Completer, Embedder
from src.retrieval.retriever import Retriever
from src.storage.vector_ids import url_prefix
from src.storage.vector_store import VectorStore

logger = logging.getLogger(__name__)

NO_EVIDENCE_MESSAGE = (
    "Sorry, I could not find the information needed to answer this question "
    "in the indexed pages.\n\n"
    "Please add the relevant web pages first, then ask your question again."
)


class RagPipeline:
    """Runs page ingestion and question answering.

    All collaborators are injected. Each call is independent: nothing is
    remembered between turns except what lives in the vector store.

    Args:
        config: Application configuration.
        scraper: Fetches pages for ``ingest_url``.
        embedder: Embeds chunks and questions.
        completer: Generates answers.
        store: Vector store holding all chunks.
    """

    def __init__(
        self,
        config: AppConfig,
        scraper: Scraper,
        embedder: Embedder,
        completer: Completer,
        store: VectorStore,
    ) -> None:
        self._config = config
        self._scraper = scraper
        self._embedder = embedder
        self._completer = completer
        self._store = store
        self._chunker = TextChunker(config.chunking)
        self._indexer = Indexer(store, config.indexing)
        self._retriever = Retriever(embedder, store)
        self._assembler = ContextAssembler.from_config(config.retrieval)

    @classmethod
    def from_config(cls, config: AppConfig) -> "RagPipeline":
        """Build a pipeline backed by Gemini, Chroma and the web scraper."""
        from src.providers.gemini import (
            GeminiCompleter,
            GeminiEmbedder,
            create_client,
        )
        from src.storage.chroma_store import ChromaVectorStore

        client = create_client(config.google_api_key)
        return cls(
            config=config,
            scraper=WebScraper(config.scraper),
            embedder=GeminiEmbedder(client, config.embedding),
            completer=GeminiCompleter(client, config.generation),
            store=ChromaVectorStore(
                config.storage.chroma_dir, config.storage.collection_name
            ),
        )

    async def close(self) -> None:
        aclose = getattr(self._scraper, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "RagPipeline":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ── Ingest ──────────────────────────────────────────────────────────

    async def ingest_url(self, url: str) -> IngestResult:
        """Fetch a page and replace its indexed chunks.

        Args:
            url: Absolute http(s) URL.

        Returns:
            IngestResult with the number of chunks written.

        Raises:
            ValidationError: If url is missing or not http(s).
            FetchError, EmbeddingError, StoreError: From collaborators.
        """
        if not url or not is_valid_url(url):
            raise ValidationError(f"A valid http(s) URL is required, got {url!r}")

        page = await self._scraper.fetch(url)
        document = self._chunker.build_document(
            url=page.url,
            title=page.title,
            text=page.content,
            timestamp=page.timestamp,
        )
        count = await self.ingest_document(document)

        return IngestResult(
            url=page.url,
            title=page.title,
            chunks_processed=count,
            vector_prefix=url_prefix(page.url),
        )

    async def ingest_document(self, document: Document) -> int:
        """Embed a chunked document and index it.

        Raises:
            ValidationError: If the document has no chunks.
        """
        if not document.chunks:
            raise ValidationError(f"No content to index for {document.source_url}")

        logger.info(
            "Embedding %d chunks for %s", len(document.chunks), document.source_url
        )
        texts = document.chunk_texts
        embeddings = await self._embedder.embed_batch(texts)

        return await self._indexer.reindex(
            url=document.source_url,
            chunks=texts,
            embeddings=embeddings,
            title=document.title,
            timestamp=document.timestamp,
        )

    async def delete_source(self, url: str) -> None:
        if not url:
            raise ValidationError("URL is required")
        await self._indexer.delete_source(url)

    async def stats(self) -> StoreStats:
        return await self._store.stats()

    # ── Answer ──────────────────────────────────────────────────────────

    async def answer(
        self, message: str, conversation_id: str | None = None
    ) -> ChatAnswer:
        """Answer a question from the indexed pages.

        When no retrieved chunk passes the relevance filter the turn
        short-circuits to ``NO_EVIDENCE_MESSAGE`` and the completer is not
        called.

        Args:
            message: The user's question.
            conversation_id: Id from a previous turn, if any.

        Returns:
            ChatAnswer with the cleaned answer and its cited sources.

        Raises:
            ValidationError: If message is blank.
            EmbeddingError, CompletionError, StoreError: From collaborators.
        """
        if not message or not message.strip():
            raise ValidationError("A non-empty message is required")

        conv_id = resolve_conversation_id(conversation_id)

        matches = await self._retriever.retrieve(
            message, top_k=self._config.retrieval.top_k
        )
        context = self._assembler.assemble(matches)

        if context.is_empty:
            return ChatAnswer(
                response=NO_EVIDENCE_MESSAGE, sources=[], conversation_id=conv_id
            )

        raw_answer = await self._completer.complete(
            build_prompt(message, context.context_text)
        )
        response, sources = extract_citations(raw_answer, context.section_map)

        logger.info(
            "Answered with %d of %d sections cited",
            len(sources),
            len(context.section_map),
        )
        return ChatAnswer(response=response, sources=sources, conversation_id=conv_id)
