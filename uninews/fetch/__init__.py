"""
Article fetching and extraction.

This package handles HTTP fetching and main-content extraction.
"""

from .extractor import NodeCleaner, extract_content, extract_image_url, extract_title, find_roots
from .fetcher import FetchResult, fetch_url

__all__ = [
    "fetch_url",
    "FetchResult",
    "extract_content",
    "extract_title",
    "extract_image_url",
    "find_roots",
    "NodeCleaner",
]
