"""
Core data types for Uninews.

This module defines the data structures passed between pipeline stages:
- ExtractedContent: Cleaned article HTML plus page metadata
- Post: The final result handed back to callers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ExtractedContent:
    """Output of the content extractor, consumed once by the requestor.

    Attributes:
        html: Cleaned HTML of the article root (may be empty)
        title: Candidate title from page metadata or the first heading
        image_url: Featured image URL from social-preview metadata, or ""
        author: Author from page metadata, if any
        publication_date: ISO 8601 publication date from page metadata, if any
        root_selector: Selector (or fallback extractor name) that produced ``html``
    """

    html: str
    title: str = ""
    image_url: str = ""
    author: str | None = None
    publication_date: str | None = None
    root_selector: str | None = None


@dataclass(frozen=True)
class Post:
    """A scraped article.

    Always check ``error`` first: when it is non-empty every other field is
    empty and must not be used.

    Attributes:
        title: The article title
        content: The article body in Markdown
        image_url: URL of the featured image, or ""
        error: Error message; empty string on success
        author: Article author, if available
        publication_date: Publication date (ISO 8601), if available
    """

    title: str = ""
    content: str = ""
    image_url: str = ""
    error: str = ""
    author: str | None = None
    publication_date: str | None = None

    @property
    def ok(self) -> bool:
        return not self.error

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the ``featured_image_url`` key used by JSON output."""
        return {
            "title": self.title,
            "content": self.content,
            "featured_image_url": self.image_url,
            "publication_date": self.publication_date,
            "author": self.author,
            "error": self.error,
        }
