"""Prompt loading and rendering helpers for LLM providers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import json
from pathlib import Path


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@dataclass(frozen=True)
class MarkdownRequest:
    """Everything the language model needs to render one article.

    Attributes:
        content: Cleaned article HTML (already truncated)
        language: Target language for the Markdown output
        title: Article title
        image_url: Featured image URL, or ""
        author: Article author, if known
        publication_date: Publication date, if known
    """

    content: str
    language: str
    title: str = ""
    image_url: str = ""
    author: str | None = None
    publication_date: str | None = None


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_system_prompt(request: MarkdownRequest) -> str:
    return _render_template("system", language=request.language)


def build_user_prompt(request: MarkdownRequest) -> str:
    post_json = json.dumps(
        {
            "title": request.title,
            "content": request.content,
            "featured_image_url": request.image_url,
            "publication_date": request.publication_date,
            "author": request.author,
        },
        ensure_ascii=False,
    )
    return _render_template("user", language=request.language, post_json=post_json)
