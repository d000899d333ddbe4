"""Assembly of the final Post from extracted metadata and converted Markdown."""

from __future__ import annotations

from .types import ExtractedContent, Post


NO_CONTENT_ERROR = "Could not extract meaningful content from the page."


def assemble_post(extracted: ExtractedContent, markdown: str) -> Post:
    """Merge extraction metadata with the model's Markdown.

    A blank Markdown response means the page had nothing usable, which is
    reported as a failure rather than an empty success.
    """
    content = markdown.strip()
    if not content:
        return failed_post(NO_CONTENT_ERROR)
    return Post(
        title=extracted.title,
        content=content,
        image_url=extracted.image_url,
        author=extracted.author,
        publication_date=extracted.publication_date,
    )


def failed_post(error: str) -> Post:
    """Build a Post that carries only an error message."""
    return Post(error=error or "Unknown error")
