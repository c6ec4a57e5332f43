"""End-to-end tests of the ingest and answer flows with test doubles."""

import re

import pytest

from conftest import (
    FakeCompleter,
    FakeEmbedder,
    FakeScraper,
    InMemoryVectorStore,
    make_page,
)
from src.config import AppConfig
from src.errors import CompletionError, EmbeddingError, FetchError, ValidationError
from src.models.vector import Match
from src.pipeline import NO_EVIDENCE_MESSAGE, RagPipeline
from src.storage.vector_ids import url_prefix, vector_id

PYTHON_URL = "https://example.com/python"
COFFEE_URL = "https://example.com/coffee"


def _long_text(word: str, count: int) -> str:
    return " ".join(f"{word} fact{i:03d}" for i in range(count))


@pytest.fixture
def pipeline(
    app_config: AppConfig,
    scraper: FakeScraper,
    embedder: FakeEmbedder,
    completer: FakeCompleter,
    store: InMemoryVectorStore,
) -> RagPipeline:
    scraper.pages[PYTHON_URL] = make_page(
        PYTHON_URL, _long_text("python", 400), title="Python Notes"
    )
    scraper.pages[COFFEE_URL] = make_page(
        COFFEE_URL, _long_text("coffee", 50), title="Coffee Notes"
    )
    return RagPipeline(
        config=app_config,
        scraper=scraper,
        embedder=embedder,
        completer=completer,
        store=store,
    )


# ── Ingest ───────────────────────────────────────────────────────────────────


class TestIngest:
    @pytest.mark.asyncio
    async def test_ingest_url_indexes_all_chunks(
        self, pipeline: RagPipeline, store: InMemoryVectorStore
    ) -> None:
        result = await pipeline.ingest_url(PYTHON_URL)

        assert result.url == PYTHON_URL
        assert result.title == "Python Notes"
        assert result.vector_prefix == url_prefix(PYTHON_URL)
        assert result.chunks_processed > 1
        assert len(store.records) == result.chunks_processed
        for i in range(result.chunks_processed):
            meta = store.records[vector_id(PYTHON_URL, i)].metadata
            assert meta.chunk_index == i
            assert meta.total_chunks == result.chunks_processed
            assert meta.timestamp == "2024-05-01T12:00:00"

    @pytest.mark.asyncio
    async def test_chunks_embedded_in_one_batch_call(
        self, pipeline: RagPipeline, embedder: FakeEmbedder
    ) -> None:
        result = await pipeline.ingest_url(COFFEE_URL)
        assert len(embedder.batch_calls) == 1
        assert len(embedder.batch_calls[0]) == result.chunks_processed

    @pytest.mark.asyncio
    async def test_reingest_shrinking_page(
        self,
        pipeline: RagPipeline,
        scraper: FakeScraper,
        store: InMemoryVectorStore,
    ) -> None:
        first = await pipeline.ingest_url(PYTHON_URL)
        scraper.pages[PYTHON_URL] = make_page(PYTHON_URL, _long_text("python", 20))

        second = await pipeline.ingest_url(PYTHON_URL)

        assert second.chunks_processed < first.chunks_processed
        for i in range(second.chunks_processed, first.chunks_processed):
            assert vector_id(PYTHON_URL, i) not in store.records
        assert len(store.records) == second.chunks_processed

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "ftp://example.com", "not a url"])
    async def test_invalid_url_rejected(
        self, pipeline: RagPipeline, scraper: FakeScraper, url: str
    ) -> None:
        with pytest.raises(ValidationError):
            await pipeline.ingest_url(url)
        assert scraper.fetched == []

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(
        self, pipeline: RagPipeline, scraper: FakeScraper, store: InMemoryVectorStore
    ) -> None:
        async def failing_fetch(url: str):  # type: ignore[no-untyped-def]
            raise FetchError("Page not found (404)")

        scraper.fetch = failing_fetch  # type: ignore[method-assign]
        with pytest.raises(FetchError):
            await pipeline.ingest_url(PYTHON_URL)
        assert store.records == {}

    @pytest.mark.asyncio
    async def test_embedding_error_leaves_store_untouched(
        self,
        pipeline: RagPipeline,
        embedder: FakeEmbedder,
        store: InMemoryVectorStore,
    ) -> None:
        async def failing_batch(texts: list[str]) -> list[list[float]]:
            raise EmbeddingError("Could not create embedding: quota")

        embedder.embed_batch = failing_batch  # type: ignore[method-assign]
        with pytest.raises(EmbeddingError):
            await pipeline.ingest_url(PYTHON_URL)
        assert store.records == {}
        assert store.upsert_batches == []
        assert store.delete_batches == []

    @pytest.mark.asyncio
    async def test_delete_source(
        self, pipeline: RagPipeline, store: InMemoryVectorStore
    ) -> None:
        await pipeline.ingest_url(PYTHON_URL)
        await pipeline.ingest_url(COFFEE_URL)
        await pipeline.delete_source(PYTHON_URL)
        assert all(r.metadata.url == COFFEE_URL for r in store.records.values())

    @pytest.mark.asyncio
    async def test_stats(self, pipeline: RagPipeline) -> None:
        result = await pipeline.ingest_url(COFFEE_URL)
        stats = await pipeline.stats()
        assert stats.total_count == result.chunks_processed
        assert stats.dimension == 5


# ── Answer ───────────────────────────────────────────────────────────────────


class TestAnswer:
    @pytest.mark.asyncio
    async def test_no_evidence_skips_completer(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        answer = await pipeline.answer("What about python?")

        assert answer.response == NO_EVIDENCE_MESSAGE
        assert answer.sources == []
        assert completer.call_count == 0

    @pytest.mark.asyncio
    async def test_irrelevant_matches_skip_completer(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)
        answer = await pipeline.answer("Tell me about rust gardens")
        assert answer.response == NO_EVIDENCE_MESSAGE
        assert completer.call_count == 0

    @pytest.mark.asyncio
    async def test_answer_with_citations(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        await pipeline.ingest_url(PYTHON_URL)
        await pipeline.ingest_url(COFFEE_URL)
        completer.reply = "Python is a language.\n\nKULLANILAN BÖLÜMLER: 2, 1"

        answer = await pipeline.answer("What is python?")

        assert answer.response == "Python is a language."
        assert answer.sources == [f"Python Notes ({PYTHON_URL})"]
        assert completer.call_count == 1

    @pytest.mark.asyncio
    async def test_prompt_has_at_most_five_sections(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        await pipeline.ingest_url(PYTHON_URL)
        await pipeline.answer("python")

        prompt = completer.prompts[0]
        numbers = [int(n) for n in re.findall(r"^SECTION (\d+):$", prompt, re.MULTILINE)]
        assert numbers == [1, 2, 3, 4, 5]
        assert "QUESTION: python" in prompt

    @pytest.mark.asyncio
    async def test_missing_marker_keeps_answer(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)
        completer.reply = "Coffee is brewed."
        answer = await pipeline.answer("coffee?")
        assert answer.response == "Coffee is brewed."
        assert answer.sources == []

    @pytest.mark.asyncio
    async def test_conversation_id_generated(self, pipeline: RagPipeline) -> None:
        answer = await pipeline.answer("python?")
        assert re.fullmatch(r"conv_\d+_[0-9a-z]{9}", answer.conversation_id)

    @pytest.mark.asyncio
    async def test_conversation_id_reused(self, pipeline: RagPipeline) -> None:
        answer = await pipeline.answer("python?", conversation_id="conv_1_abc")
        assert answer.conversation_id == "conv_1_abc"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "  \n "])
    async def test_blank_message_rejected(
        self, pipeline: RagPipeline, embedder: FakeEmbedder, message: str
    ) -> None:
        with pytest.raises(ValidationError):
            await pipeline.answer(message)
        assert embedder.embed_calls == []

    @pytest.mark.asyncio
    async def test_turns_are_independent(
        self,
        pipeline: RagPipeline,
        completer: FakeCompleter,
        store: InMemoryVectorStore,
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)
        completer.reply = "Answer.\n\nKULLANILAN BÖLÜMLER: 1"

        first = await pipeline.answer("coffee?", conversation_id="conv_1_x")
        await pipeline.delete_source(COFFEE_URL)
        second = await pipeline.answer("coffee?", conversation_id="conv_1_x")

        assert first.sources == [f"Coffee Notes ({COFFEE_URL})"]
        assert second.response == NO_EVIDENCE_MESSAGE
        assert second.sources == []

    @pytest.mark.asyncio
    async def test_foreign_records_labelled(
        self,
        app_config: AppConfig,
        scraper: FakeScraper,
        embedder: FakeEmbedder,
        completer: FakeCompleter,
    ) -> None:
        class FixedStore(InMemoryVectorStore):
            async def query(self, vector: list[float], top_k: int) -> list[Match]:
                return [Match(id="pdf-0001-xyz", score=0.9, metadata={"content": "c"})]

        pipeline = RagPipeline(app_config, scraper, embedder, completer, FixedStore())
        answer = await pipeline.answer("anything")
        assert answer.sources == ["Web page (pdf-0001...)"]

    @pytest.mark.asyncio
    async def test_completion_error_aborts_turn(
        self, pipeline: RagPipeline, completer: FakeCompleter
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)

        async def failing_complete(prompt: str) -> str:
            raise CompletionError("Could not generate an answer: quota")

        completer.complete = failing_complete  # type: ignore[method-assign]
        answer = None
        with pytest.raises(CompletionError):
            answer = await pipeline.answer("coffee?")
        assert answer is None

    @pytest.mark.asyncio
    async def test_query_embedding_error_aborts_turn(
        self,
        pipeline: RagPipeline,
        embedder: FakeEmbedder,
        completer: FakeCompleter,
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)

        async def failing_embed(text: str) -> list[float]:
            raise EmbeddingError("Could not create embedding: quota")

        embedder.embed = failing_embed  # type: ignore[method-assign]
        answer = None
        with pytest.raises(EmbeddingError):
            answer = await pipeline.answer("coffee?")
        assert answer is None
        assert completer.call_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("footer", ["1, ²", "1, " + "9" * 5000])
    async def test_odd_footer_numbers_do_not_fail_turn(
        self, pipeline: RagPipeline, completer: FakeCompleter, footer: str
    ) -> None:
        await pipeline.ingest_url(COFFEE_URL)
        completer.reply = "Coffee is brewed.\n\nKULLANILAN BÖLÜMLER: " + footer
        answer = await pipeline.answer("coffee?")
        assert answer.response == "Coffee is brewed."
        assert answer.sources == [f"Coffee Notes ({COFFEE_URL})"]


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_closes_scraper(
        self,
        app_config: AppConfig,
        embedder: FakeEmbedder,
        completer: FakeCompleter,
        store: InMemoryVectorStore,
    ) -> None:
        class ClosingScraper(FakeScraper):
            closed = False

            async def aclose(self) -> None:
                self.closed = True

        scraper = ClosingScraper()
        async with RagPipeline(app_config, scraper, embedder, completer, store):
            pass
        assert scraper.closed
