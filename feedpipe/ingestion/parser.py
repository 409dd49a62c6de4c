"""RSS 2.0 / Atom parser producing ParsedItem records."""

import calendar
import io
import time
import xml.sax
from typing import Any, List, Optional, Tuple

import feedparser
import pendulum
import structlog

from ..errors import FeedParseError, FeedPipeError, UnsupportedFormatError
from .models import ParsedItem, ParseResult

logger = structlog.get_logger(__name__)

# feedparser version strings for documents rooted at <rss><channel>.
# RDF-based rss090/rss10 are not included.
RSS_CHANNEL_VERSIONS = frozenset(
    {"rss", "rss091n", "rss091u", "rss092", "rss093", "rss094", "rss20"}
)
ATOM_VERSIONS = frozenset({"atom", "atom01", "atom02", "atom03", "atom10"})


def as_list(value: Any) -> List[Any]:
    """Coerce a scalar-or-sequence node into a list with None entries dropped."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [v for v in value if v is not None]
    return [value]


def _to_datetime(parsed: Optional[time.struct_time]) -> Optional[pendulum.DateTime]:
    if not parsed:
        return None
    try:
        return pendulum.from_timestamp(calendar.timegm(parsed))
    except (OverflowError, ValueError):
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _category_terms(entry: Any) -> List[str]:
    terms = []
    for tag in as_list(entry.get("tags")):
        if isinstance(tag, dict):
            term = tag.get("term") or tag.get("label")
        else:
            term = tag
        term = _text(term)
        if term:
            terms.append(term)
    return terms


def _atom_link(entry: Any) -> Optional[str]:
    """Resolve an entry URL, preferring rel="alternate" over the first link."""
    links = [link for link in as_list(entry.get("links")) if isinstance(link, dict)]
    for link in links:
        if link.get("rel", "alternate") == "alternate" and link.get("href"):
            return link["href"]
    for link in links:
        if link.get("href"):
            return link["href"]
    return _text(entry.get("link"))


def _atom_description(entry: Any) -> Optional[str]:
    summary = _text(entry.get("summary"))
    if summary:
        return summary
    for content in as_list(entry.get("content")):
        value = _text(content.get("value") if isinstance(content, dict) else content)
        if value:
            return value
    return None


class FeedParser:
    """Detect the feed format and normalize entries. Pure, no I/O."""

    def parse_feed(self, raw: str) -> List[ParsedItem]:
        """Parse a payload into items.

        Raises:
            UnsupportedFormatError: the document is XML but neither RSS 2.0 nor Atom
            FeedParseError: the document is not XML at all
        """
        _, items = self._detect_and_parse(raw)
        return items

    def parse(self, raw: str) -> ParseResult:
        """Parse a payload, returning the error instead of raising it."""
        try:
            feed_format, items = self._detect_and_parse(raw)
        except FeedPipeError as e:
            return ParseResult(success=False, error=e)
        except Exception as e:
            return ParseResult(success=False, error=FeedParseError(f"Unexpected parse error: {e}"))
        return ParseResult(success=True, feed_format=feed_format, items=items)

    def _detect_and_parse(self, raw: str) -> Tuple[str, List[ParsedItem]]:
        # A str is treated as a URL or file path by feedparser, so hand it a stream.
        parsed = feedparser.parse(
            io.BytesIO(raw.encode("utf-8")),
            response_headers={"content-type": "application/xml; charset=utf-8"},
        )
        version = parsed.get("version") or ""

        if version in RSS_CHANNEL_VERSIONS:
            return "rss2", self._parse_rss2(parsed)
        if version in ATOM_VERSIONS:
            return "atom", self._parse_atom(parsed)

        exc = parsed.get("bozo_exception")
        if parsed.get("bozo") and isinstance(exc, xml.sax.SAXException):
            raise FeedParseError(f"Malformed XML: {exc}")
        raise UnsupportedFormatError(
            f"Unsupported feed format{f' ({version})' if version else ''}"
        )

    def _parse_rss2(self, parsed: Any) -> List[ParsedItem]:
        items = []
        for entry in as_list(parsed.get("entries")):
            url = _text(entry.get("link"))
            guid = _text(entry.get("id")) or url
            if not guid:
                logger.debug("feed_item_skipped", reason="no guid or link")
                continue
            items.append(
                ParsedItem(
                    guid=guid,
                    url=url or guid,
                    title=_text(entry.get("title")) or url or guid,
                    description=_text(entry.get("summary")),
                    author=_text(entry.get("author")),
                    published_at=_to_datetime(entry.get("published_parsed")),
                    categories=_category_terms(entry),
                )
            )
        return items

    def _parse_atom(self, parsed: Any) -> List[ParsedItem]:
        items = []
        for entry in as_list(parsed.get("entries")):
            url = _atom_link(entry)
            guid = _text(entry.get("id")) or url
            if not guid:
                logger.debug("feed_item_skipped", reason="no id or link")
                continue
            author = entry.get("author_detail") or {}
            items.append(
                ParsedItem(
                    guid=guid,
                    url=url or guid,
                    title=_text(entry.get("title")) or url or guid,
                    description=_atom_description(entry),
                    author=_text(author.get("name")) or _text(entry.get("author")),
                    published_at=_to_datetime(entry.get("updated_parsed")),
                    categories=_category_terms(entry),
                )
            )
        return items
