"""Scraped web page data model."""

from datetime import datetime

from pydantic import BaseModel, Field


class ScrapedPage(BaseModel):
    """The cleaned content of a fetched web page."""

    url: str
    title: str
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
