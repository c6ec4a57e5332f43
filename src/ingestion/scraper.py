"""Web page fetcher and HTML text extractor."""

import logging
import re
from datetime import datetime
from typing import Protocol
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from src.config import ScraperConfig
from src.errors import FetchError, ValidationError
from src.models.page import ScrapedPage

logger = logging.getLogger(__name__)

# Page chrome removed before text extraction
NOISE_TAGS: list[str] = ["script", "style", "nav", "header", "footer", "aside"]

# Main-content containers, tried in order before falling back to <body>
CONTENT_SELECTORS: list[str] = [
    "article",
    "main",
    '[role="main"]',
    ".content",
    ".post-content",
    ".entry-content",
    ".article-content",
    "#content",
    ".main-content",
]

DEFAULT_TITLE = "Untitled page"


class Scraper(Protocol):
    """Fetches a URL and returns its title and cleaned text."""

    async def fetch(self, url: str) -> ScrapedPage: ...


def is_valid_url(url: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces and trim."""
    return re.sub(r"\s+", " ", text).strip()


def extract_page(html: str) -> tuple[str, str]:
    """Extract the title and main text from an HTML document.

    Strips scripts, styles and navigation chrome, then reads the first
    main-content container that exists, or the whole body.

    Args:
        html: Raw HTML markup.

    Returns:
        Tuple of (title, cleaned text).
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup(NOISE_TAGS):
        tag.decompose()

    title = ""
    if soup.title is not None:
        title = clean_text(soup.title.get_text())
    if not title:
        h1 = soup.find("h1")
        if h1 is not None:
            title = clean_text(h1.get_text())

    content = ""
    for selector in CONTENT_SELECTORS:
        elements = soup.select(selector)
        if elements:
            content = " ".join(el.get_text(separator=" ") for el in elements)
            break
    else:
        body = soup.body or soup
        content = body.get_text(separator=" ")

    return title or DEFAULT_TITLE, clean_text(content)


class WebScraper:
    """Fetches web pages over HTTP and reduces them to clean text.

    Args:
        config: ScraperConfig with timeout, user agent and minimum length.
        client: Optional pre-built httpx.AsyncClient. When omitted the
            scraper owns its client and closes it in ``aclose``.
    """

    def __init__(
        self, config: ScraperConfig, client: httpx.AsyncClient | None = None
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=config.timeout_seconds,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> ScrapedPage:
        """Fetch a page and extract its title and text.

        Args:
            url: Absolute http(s) URL.

        Returns:
            ScrapedPage with cleaned content.

        Raises:
            ValidationError: If url is not an http(s) URL.
            FetchError: On timeout, HTTP error status, transport failure,
                or when the page has too little text.
        """
        if not is_valid_url(url):
            raise ValidationError(f"Invalid URL: {url!r}")

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out loading {url}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                raise FetchError(f"Page not found (404): {url}") from exc
            if status == 403:
                raise FetchError(f"Access denied (403): {url}") from exc
            raise FetchError(f"HTTP error {status}: {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not fetch {url}: {exc}") from exc

        title, content = extract_page(response.text)

        if len(content) < self._config.min_content_length:
            raise FetchError(f"Page content is too short or empty: {url}")

        logger.info("Fetched %s (%d chars): %s", url, len(content), title)
        return ScrapedPage(
            url=url,
            title=title,
            content=content,
            timestamp=datetime.now(),
        )
