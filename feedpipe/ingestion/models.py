"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import FeedPipeError


class ParsedItem(BaseModel):
    """Feed entry normalized from RSS 2.0 or Atom. Not persisted directly."""

    guid: str = Field(..., description="Stable identifier; the URL when the feed omits one")
    url: str = Field(..., description="Item URL")
    title: str = Field(..., description="Item title")
    description: Optional[str] = Field(None, description="Summary or content")
    author: Optional[str] = Field(None, description="Author name")
    published_at: Optional[datetime] = Field(None, description="Publication date")
    categories: List[str] = Field(default_factory=list, description="Category terms")


class FetchResult(BaseModel):
    """Outcome of a single feed fetch: a payload or an error."""

    url: str = Field(..., description="Requested feed URL")
    success: bool = Field(..., description="Whether a 2xx payload was received")
    body: Optional[str] = Field(None, description="Raw response text")
    status_code: Optional[int] = Field(None, description="HTTP status, if a response arrived")
    elapsed_ms: float = Field(0.0, description="Wall time spent fetching")
    error: Optional[FeedPipeError] = Field(None, description="FeedTimeoutError or FeedFetchError")

    class Config:
        """Pydantic config."""

        arbitrary_types_allowed = True

    @property
    def size(self) -> int:
        return len(self.body) if self.body is not None else 0


class ParseResult(BaseModel):
    """Outcome of parsing a payload: items or an error."""

    success: bool = Field(..., description="Whether the payload was parsed")
    feed_format: Optional[str] = Field(None, description="'rss2' or 'atom'")
    items: List[ParsedItem] = Field(default_factory=list, description="Normalized items")
    error: Optional[FeedPipeError] = Field(None, description="UnsupportedFormatError or FeedParseError")

    class Config:
        """Pydantic config."""

        arbitrary_types_allowed = True
