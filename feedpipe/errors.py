"""Error taxonomy for the feed pipeline."""

from typing import Optional


class FeedPipeError(Exception):
    """Base class for all pipeline errors."""


class FeedTimeoutError(FeedPipeError):
    """Feed fetch exceeded its time budget."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Feed fetch timed out after {timeout:g}s: {url}")
        self.url = url
        self.timeout = timeout


class FeedFetchError(FeedPipeError):
    """Non-2xx HTTP response or transport failure.

    ``status`` is ``None`` when no response was received at all.
    """

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        status_text: str = "",
    ) -> None:
        if status is None:
            message = f"Failed to fetch feed: {status_text}"
        else:
            message = f"Failed to fetch feed: {status} {status_text}".rstrip()
        super().__init__(message)
        self.url = url
        self.status = status
        self.status_text = status_text


class UnsupportedFormatError(FeedPipeError):
    """Payload is neither RSS 2.0 nor Atom."""

    def __init__(self, message: str = "Unsupported feed format") -> None:
        super().__init__(message)


class FeedParseError(FeedPipeError):
    """Payload is not well-formed XML."""


class StoreError(FeedPipeError):
    """Persistence failure."""


class FetchFailed(FeedPipeError):
    """Read path failure surfaced to the caller."""

    def __init__(self, message: str = "Failed to get feed items") -> None:
        super().__init__(message)
