"""
Core domain models.

This package contains the data types shared by every pipeline stage
and the assembly of the final Post.
"""

from .assembler import NO_CONTENT_ERROR, assemble_post, failed_post
from .types import ExtractedContent, Post

__all__ = [
    "ExtractedContent",
    "Post",
    "NO_CONTENT_ERROR",
    "assemble_post",
    "failed_post",
]
