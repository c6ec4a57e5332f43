"""Page ingestion: fetching and chunking."""

from src.ingestion.chunker import TextChunker, chunk_text
from src.ingestion.scraper import Scraper, WebScraper

__all__ = ["Scraper", "TextChunker", "WebScraper", "chunk_text"]
