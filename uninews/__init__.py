"""
Uninews - Universal news scraper.

This package fetches a news article, isolates its main content from the
surrounding markup, and asks a language model to render it as Markdown
(optionally translated).

Example:
    >>> from uninews import universal_scrape
    >>> post = universal_scrape("https://example.com/article", "spanish")
    >>> if not post.error:
    ...     print(post.title, post.content)

The CLI is available as ``uninews URL [-l LANGUAGE] [--json]``.
"""

__all__ = [
    "__version__",
    "universal_scrape",
    "scrape",
    "Post",
    "ExtractedContent",
    "AppConfig",
    "load_config",
    "UninewsError",
    "FetchError",
    "ExtractionError",
    "ConversionError",
]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .core.types import ExtractedContent, Post
from .errors import ConversionError, ExtractionError, FetchError, UninewsError
from .runner import scrape, universal_scrape
