"""
HTML content extraction.

The article root is located by trying an ordered list of CSS selectors
(``<article>`` first, ``<body>`` as the fallback). The chosen subtree is then
walked by NodeCleaner, which drops noise elements and re-serializes only
the structure that matters for Markdown conversion. When every root
cleans down to nothing, a chain of fallback extractors is tried:
1. readability: Mozilla's readability algorithm
2. trafilatura: Purpose-built article text extraction
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Callable, Iterator
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag
from readability import Document
import trafilatura

from ..config import ExtractConfig
from ..core.types import ExtractedContent
from ..errors import ExtractionError


_WHITESPACE_RE = re.compile(r"\s+")
_URL_ATTRIBUTES = {"href", "src"}
_EMPTY_ALLOWED = {"br", "hr"}
_VOID_TAGS = {"img", "br", "hr"}

logger = logging.getLogger(__name__)


def extract_content(html: str, cfg: ExtractConfig, base_url: str | None = None) -> ExtractedContent:
    """Reduce a full HTML document to its article content and metadata.

    Args:
        html: The raw HTML document
        cfg: Extraction settings (root selectors, noise lists, fallbacks)
        base_url: URL the document was fetched from, used to resolve relative links

    Returns:
        ExtractedContent; ``html`` may be empty when nothing survived cleaning

    Raises:
        ExtractionError: If the document is empty or no root selector matches
    """
    if not html or not html.strip():
        raise ExtractionError("Could not parse an empty document.")

    soup = BeautifulSoup(html, cfg.parser)
    cleaner = NodeCleaner(cfg, base_url)

    cleaned = ""
    root_selector: str | None = None
    heading_scope: Tag | None = None
    for selector, root in find_roots(soup, cfg.root_selectors):
        root_selector = selector
        heading_scope = root
        cleaned = cleaner.clean(root)
        if cleaned:
            break

    if heading_scope is None:
        selectors = ", ".join(cfg.root_selectors)
        raise ExtractionError(f"No article root found in the document (tried: {selectors}).")

    if not cleaned:
        for name, fallback_html in _run_fallbacks(html, cfg.fallback):
            cleaned = cleaner.clean_fragment(fallback_html)
            if cleaned:
                root_selector = name
                break

    return ExtractedContent(
        html=cleaned,
        title=extract_title(soup, heading_scope),
        image_url=extract_image_url(soup, base_url),
        author=_meta_content(soup, 'meta[name="author"]', 'meta[property="article:author"]'),
        publication_date=_meta_content(
            soup,
            'meta[property="article:published_time"]',
            'meta[name="article:published_time"]',
        ),
        root_selector=root_selector,
    )


def find_roots(soup: BeautifulSoup, selectors: list[str]) -> Iterator[tuple[str, Tag]]:
    """Yield ``(selector, element)`` for each selector that matches, in order."""
    for selector in selectors:
        root = soup.select_one(selector)
        if root is not None:
            yield selector, root


def extract_title(soup: BeautifulSoup, root: Tag | None = None) -> str:
    """Pick a title, preferring page metadata over the first heading.

    Headings are only searched inside ``root`` (the whole document when None)
    so site-chrome headings outside the article are not picked up.
    """
    title = _meta_content(
        soup,
        'meta[property="og:title"]',
        'meta[name="og:title"]',
        'meta[name="twitter:title"]',
    )
    if title:
        return title
    scope = root if root is not None else soup
    for node in (soup.find("title"), scope.find(["h1", "h2"])):
        if node is None:
            continue
        text = _collapse(node.get_text(" "))
        if text:
            return text
    return ""


def extract_image_url(soup: BeautifulSoup, base_url: str | None = None) -> str:
    """Return the social-preview image URL, or "" when the page has none."""
    url = _meta_content(
        soup,
        'meta[property="og:image"]',
        'meta[property="og:image:url"]',
        'meta[name="twitter:image"]',
        'meta[property="twitter:image"]',
    )
    if not url:
        return ""
    return urljoin(base_url, url) if base_url else url


class NodeCleaner:
    """Serializes a subtree while dropping noise.

    Each node is dispatched on its kind: elements go through
    ``visit_tag``, text through ``visit_text``, and every other markup
    string (comments, doctypes, CDATA, processing instructions) through
    ``visit_markup``, which discards it.
    """

    def __init__(self, cfg: ExtractConfig, base_url: str | None = None):
        self.noise_tags = {name.lower() for name in cfg.noise_tags}
        self.noise_selectors = list(cfg.noise_selectors)
        self.keep_attributes = list(cfg.keep_attributes)
        self.parser = cfg.parser
        self.base_url = base_url
        self._noise: set[int] = set()
        self._pre_depth = 0

    def clean(self, root: Tag) -> str:
        """Return the cleaned HTML of ``root``, or "" if nothing meaningful remains."""
        self._noise = {id(el) for selector in self.noise_selectors for el in root.select(selector)}
        self._pre_depth = 0
        inner, meaningful = self._visit_children(root)
        if not meaningful:
            return ""
        return self._wrap(root, inner)

    def clean_fragment(self, fragment: str) -> str:
        """Clean an HTML fragment produced by a fallback extractor."""
        soup = BeautifulSoup(fragment, self.parser)
        root = soup.find("body") or soup
        self._noise = {id(el) for selector in self.noise_selectors for el in root.select(selector)}
        self._pre_depth = 0
        inner, meaningful = self._visit_children(root)
        return inner.strip() if meaningful else ""

    def visit(self, node) -> tuple[str, bool]:
        if isinstance(node, Tag):
            return self.visit_tag(node)
        if isinstance(node, PreformattedString):
            return self.visit_markup(node)
        if isinstance(node, NavigableString):
            return self.visit_text(node)
        return "", False

    def visit_tag(self, tag: Tag) -> tuple[str, bool]:
        name = (tag.name or "").lower()
        if name in self.noise_tags or id(tag) in self._noise:
            return "", False

        if name in _VOID_TAGS:
            if name == "img":
                attrs = self._attributes(tag)
                if "src" not in dict(attrs):
                    return "", False
                return f"<img{self._render_attributes(attrs)}>", True
            return f"<{name}>", False

        if name == "pre":
            self._pre_depth += 1
        try:
            inner, meaningful = self._visit_children(tag)
        finally:
            if name == "pre":
                self._pre_depth -= 1

        if not meaningful:
            return "", False
        return self._wrap(tag, inner), True

    def visit_text(self, text: NavigableString) -> tuple[str, bool]:
        value = str(text)
        if self._pre_depth:
            return html_lib.escape(value, quote=False), bool(value.strip())
        if not value.strip():
            return (" " if value else ""), False
        return html_lib.escape(_WHITESPACE_RE.sub(" ", value), quote=False), True

    def visit_markup(self, node: PreformattedString) -> tuple[str, bool]:
        return "", False

    def _visit_children(self, tag: Tag) -> tuple[str, bool]:
        parts: list[str] = []
        meaningful = False
        for child in tag.children:
            rendered, child_meaningful = self.visit(child)
            if rendered:
                parts.append(rendered)
            meaningful = meaningful or child_meaningful
        return "".join(parts), meaningful

    def _wrap(self, tag: Tag, inner: str) -> str:
        name = (tag.name or "").lower()
        body = inner if self._pre_depth or name == "pre" else inner.strip()
        body = _strip_dangling_breaks(body)
        attrs = self._render_attributes(self._attributes(tag))
        return f"<{name}{attrs}>{body}</{name}>"

    def _attributes(self, tag: Tag) -> list[tuple[str, str]]:
        kept: list[tuple[str, str]] = []
        for key in self.keep_attributes:
            value = tag.get(key)
            if value is None:
                continue
            if isinstance(value, list):
                value = " ".join(value)
            value = value.strip()
            if not value:
                continue
            if key in _URL_ATTRIBUTES:
                if value.lower().startswith("javascript:"):
                    continue
                if self.base_url:
                    value = urljoin(self.base_url, value)
            kept.append((key, value))
        return kept

    @staticmethod
    def _render_attributes(attrs: list[tuple[str, str]]) -> str:
        return "".join(f' {key}="{html_lib.escape(value, quote=True)}"' for key, value in attrs)


def _strip_dangling_breaks(body: str) -> str:
    """Drop ``<br>``/``<hr>`` left at either edge of an element."""
    changed = True
    while changed:
        changed = False
        for tag in _EMPTY_ALLOWED:
            marker = f"<{tag}>"
            if body.startswith(marker):
                body = body[len(marker):].lstrip()
                changed = True
            if body.endswith(marker):
                body = body[: -len(marker)].rstrip()
                changed = True
    return body


def _meta_content(soup: BeautifulSoup, *selectors: str) -> str | None:
    """Return the first non-empty ``content`` attribute among the selectors."""
    for selector in selectors:
        for meta in soup.select(selector):
            value = meta.get("content")
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                return _collapse(value)
    return None


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _run_fallbacks(html: str, names: list[str]) -> Iterator[tuple[str, str]]:
    """Yield ``(name, html_fragment)`` for each fallback extractor that produced output."""
    for name in names:
        extractor = _get_extractor(name)
        if not extractor:
            continue
        try:
            fragment = extractor(html)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Fallback extractor %s failed: %s", name, exc)
            continue
        if fragment:
            yield name, fragment


def _get_extractor(name: str) -> Callable[[str], str | None] | None:
    """Get the fallback extractor function for a given method name.

    Args:
        name: The name of the extraction method ("readability", "trafilatura")

    Returns:
        The corresponding extractor function, or None if name is unrecognized
    """
    if name == "readability":
        return _extract_readability
    if name == "trafilatura":
        return _extract_trafilatura
    return None


def _extract_readability(html: str) -> str | None:
    """Extract the main content block using Mozilla's readability algorithm.

    Readability is the same algorithm used in Firefox's Reader View.
    It identifies the main content block and returns simplified HTML.
    """
    return Document(html).summary(html_partial=True)


def _extract_trafilatura(html: str) -> str | None:
    """Extract article text using trafilatura and wrap each line in a paragraph.

    Trafilatura returns plain text, so structure is limited to paragraphs.
    """
    text = trafilatura.extract(html)
    if not text:
        return None
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return "".join(f"<p>{html_lib.escape(line, quote=False)}</p>" for line in lines)
