"""Google Gemini embedding and chat providers."""

import asyncio
import logging
from typing import Any

from google import genai
from google.genai import errors as genai_errors

from src.config import EmbeddingConfig, GenerationConfig
from src.errors import CompletionError, ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)


def create_client(api_key: str | None) -> genai.Client:
    """Build a Gemini client, failing early when no key is configured."""
    if not api_key:
        raise ConfigurationError("GOOGLE_API_KEY is not set")
    return genai.Client(api_key=api_key)


class GeminiEmbedder:
    """Embeds text with a Gemini embedding model.

    Batches are embedded one text at a time with a fixed pause between
    calls to stay under the provider's rate limit.

    Args:
        client: A ``google.genai.Client`` (or test double).
        config: EmbeddingConfig with model name and request delay.
    """

    def __init__(self, client: Any, config: EmbeddingConfig) -> None:
        self._client = client
        self._config = config

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Args:
            text: Text to embed.

        Returns:
            The embedding vector.

        Raises:
            EmbeddingError: If the API call fails or returns no values.
        """
        try:
            response = await self._client.aio.models.embed_content(
                model=self._config.model,
                contents=text,
            )
        except genai_errors.APIError as exc:
            logger.exception("Embedding request failed")
            raise EmbeddingError(f"Could not create embedding: {exc}") from exc

        embeddings = response.embeddings or []
        values = list(embeddings[0].values or []) if embeddings else []
        if not values:
            raise EmbeddingError("Could not create embedding: empty result")
        return values

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for i, text in enumerate(texts):
            if i:
                await asyncio.sleep(self._config.request_delay_seconds)
            vectors.append(await self.embed(text))
        logger.info("Embedded %d texts with %s", len(vectors), self._config.model)
        return vectors


class GeminiCompleter:
    """Generates answers with a Gemini chat model."""

    def __init__(self, client: Any, config: GenerationConfig) -> None:
        self._client = client
        self._config = config

    async def complete(self, prompt: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.model,
                contents=prompt,
            )
        except genai_errors.APIError as exc:
            logger.exception("Completion request failed")
            raise CompletionError(f"Could not generate an answer: {exc}") from exc

        text = response.text
        if not text or not text.strip():
            raise CompletionError("Could not generate an answer: empty response")
        return text
