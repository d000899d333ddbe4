"""Packages extracted content into a Markdown request and runs it through a provider."""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..config import RequestConfig
from ..core.types import ExtractedContent
from ..errors import ConversionError
from ..logging_utils import log_event, truncate_text
from .prompts import MarkdownRequest
from .providers.base import MarkdownProvider
from .tracing import record_span_error, set_span_output, start_span


_RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}


class MarkdownRequestor:
    """Turns ExtractedContent into Markdown via a language-model provider.

    Transport errors and retryable HTTP statuses are retried up to
    ``retries`` times with linear backoff; every failure that remains is
    raised as a ConversionError.
    """

    def __init__(
        self,
        provider: MarkdownProvider,
        cfg: RequestConfig | None = None,
        retries: int = 0,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.cfg = cfg or RequestConfig()
        self.retries = max(0, retries)
        self.logger = logger

    def build_request(self, extracted: ExtractedContent, language: str | None) -> MarkdownRequest:
        lang = (language or "").strip() or self.cfg.default_language
        return MarkdownRequest(
            content=extracted.html[: self.cfg.max_chars],
            language=lang,
            title=extracted.title,
            image_url=extracted.image_url,
            author=extracted.author,
            publication_date=extracted.publication_date,
        )

    async def to_markdown(self, extracted: ExtractedContent, language: str | None = None) -> str:
        request = self.build_request(extracted, language)
        with start_span(
            f"{self.provider.name}.to_markdown",
            kind="llm",
            input_value=request.content,
            attributes={
                "llm.model": self.provider.cfg.model,
                "llm.provider": self.provider.name,
                "article.title": request.title,
                "language": request.language,
            },
        ) as span:
            try:
                markdown = await self._convert_with_retries(request)
            except ConversionError as exc:
                record_span_error(span, exc)
                raise
            set_span_output(span, markdown)

        log_event(
            self.logger,
            "LLM response",
            event="llm_response",
            status="ok",
            model=self.provider.cfg.model,
            language=request.language,
            response_chars=len(markdown),
        )
        log_event(
            self.logger,
            "LLM response body",
            level=logging.DEBUG,
            event="llm_response_body",
            raw_response=truncate_text(markdown),
        )
        return markdown

    async def _convert_with_retries(self, request: MarkdownRequest) -> str:
        for attempt in range(self.retries + 1):
            retryable = True
            try:
                return await self.provider.convert(request)
            except httpx.HTTPStatusError as exc:
                error = ConversionError(
                    f"LLM Error: HTTP {exc.response.status_code} from {self.provider.name}: "
                    f"{_error_detail(exc.response)}"
                )
                retryable = exc.response.status_code in _RETRYABLE_STATUS
            except httpx.HTTPError as exc:
                error = ConversionError(f"LLM Error: {type(exc).__name__}: {exc}")
            except ValueError as exc:
                raise ConversionError(f"LLM Error: {exc}") from exc

            log_event(
                self.logger,
                "LLM request failed",
                level=logging.WARNING,
                event="llm_response",
                status="provider_error",
                attempt=attempt + 1,
                error=str(error),
            )
            if not retryable or attempt == self.retries:
                raise error
            await asyncio.sleep(0.5 * (attempt + 1))


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return truncate_text(resp.text, 300)
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return str(data["error"].get("message") or data["error"])
    return truncate_text(resp.text, 300)
