"""Configuration loader for the Web Page Q&A application."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Web Page Q&A"
    version: str = "1.0.0"


class ScraperConfig(BaseModel):
    """Web page fetching configuration."""

    timeout_seconds: float = 10.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )
    min_content_length: int = 100


class ChunkingConfig(BaseModel):
    """Text chunking configuration."""

    chunk_size: int = 1000


class EmbeddingConfig(BaseModel):
    """Embedding model configuration."""

    model: str = "text-embedding-004"
    request_delay_seconds: float = 0.1


class IndexingConfig(BaseModel):
    """Vector store write configuration."""

    batch_size: int = 100
    max_chunk_slots: int = 1000


class RetrievalConfig(BaseModel):
    """Retrieval and relevance filtering configuration."""

    top_k: int = 10
    min_score: float = 0.5
    max_sections: int = 5


class GenerationConfig(BaseModel):
    """LLM generation configuration."""

    model: str = "gemini-2.5-pro"


class StorageConfig(BaseModel):
    """Vector store location configuration."""

    chroma_dir: str = "./db/chroma"
    collection_name: str = "web_pages"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    indexing: IndexingConfig = Field(default_factory=IndexingConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # API key loaded from environment
    google_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override API key from environment
    config.google_api_key = os.getenv("GOOGLE_API_KEY")

    return config
