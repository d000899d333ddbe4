"""Error taxonomy for the scrape pipeline.

Each stage raises its own error type; the runner turns them into
``Post.error`` so callers never see an exception from a scrape.
"""

from __future__ import annotations


class UninewsError(Exception):
    """Base class for all pipeline errors."""


class FetchError(UninewsError):
    """Network failure, timeout, or non-success HTTP status."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(UninewsError):
    """The document has no usable root element."""


class ConversionError(UninewsError):
    """The language model call failed, including a missing credential."""
