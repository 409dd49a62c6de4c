"""Feed fetching and parsing."""

from .fetcher import FeedFetcher
from .models import FetchResult, ParsedItem, ParseResult
from .parser import FeedParser, as_list

__all__ = [
    "FeedFetcher",
    "FeedParser",
    "FetchResult",
    "ParsedItem",
    "ParseResult",
    "as_list",
]
