"""Shared test doubles for the pipeline collaborators."""

import math
from datetime import datetime

import pytest

from src.config import AppConfig
from src.errors import StoreError
from src.models.page import ScrapedPage
from src.models.vector import IndexedVector, Match, StoreStats

VOCABULARY = ["python", "coffee", "rust", "garden", "river"]


def keyword_vector(text: str) -> list[float]:
    """Bag-of-keywords embedding: one dimension per vocabulary word."""
    lowered = text.lower()
    return [float(lowered.count(word)) for word in VOCABULARY]


def cosine(a: list[float], b: list[float]) -> float:
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))
    if not norm_a or not norm_b:
        return 0.0
    return sum(x * y for x, y in zip(a, b)) / (norm_a * norm_b)


class FakeEmbedder:
    def __init__(self) -> None:
        self.embed_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        return keyword_vector(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [keyword_vector(t) for t in texts]


class FakeCompleter:
    def __init__(self, reply: str = "An answer.\n\nKULLANILAN BÖLÜMLER: 1") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class InMemoryVectorStore:
    """Dictionary-backed store with exact cosine search."""

    def __init__(self) -> None:
        self.records: dict[str, IndexedVector] = {}
        self.upsert_batches: list[list[str]] = []
        self.delete_batches: list[list[str]] = []
        self.fail_deletes = False
        self.fail_upsert_on_batch: int | None = None

    async def upsert(self, vectors: list[IndexedVector]) -> None:
        if self.fail_upsert_on_batch == len(self.upsert_batches):
            self.upsert_batches.append([])
            raise StoreError("upsert rejected")
        self.upsert_batches.append([v.id for v in vectors])
        for vector in vectors:
            self.records[vector.id] = vector

    async def query(self, vector: list[float], top_k: int) -> list[Match]:
        scored = [
            Match(
                id=rec.id,
                score=cosine(vector, rec.embedding),
                metadata=rec.metadata.to_store(),
            )
            for rec in self.records.values()
        ]
        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:top_k]

    async def delete_by_ids(self, ids: list[str]) -> None:
        self.delete_batches.append(list(ids))
        if self.fail_deletes:
            raise StoreError("delete rejected")
        for vid in ids:
            self.records.pop(vid, None)

    async def stats(self) -> StoreStats:
        dimension = None
        if self.records:
            dimension = len(next(iter(self.records.values())).embedding)
        return StoreStats(
            total_count=len(self.records),
            dimension=dimension,
            namespaces={"": len(self.records)},
        )


class FakeScraper:
    def __init__(self, pages: dict[str, ScrapedPage] | None = None) -> None:
        self.pages = pages or {}
        self.fetched: list[str] = []

    async def fetch(self, url: str) -> ScrapedPage:
        self.fetched.append(url)
        return self.pages[url]


def make_page(url: str, content: str, title: str = "Test Page") -> ScrapedPage:
    return ScrapedPage(
        url=url,
        title=title,
        content=content,
        timestamp=datetime(2024, 5, 1, 12, 0, 0),
    )


@pytest.fixture
def app_config() -> AppConfig:
    config = AppConfig()
    config.embedding.request_delay_seconds = 0.0
    return config


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def completer() -> FakeCompleter:
    return FakeCompleter()


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def scraper() -> FakeScraper:
    return FakeScraper()
