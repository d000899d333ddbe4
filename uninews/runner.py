"""
Scrape pipeline orchestration.

This module coordinates the workflow for a single URL:
1. Fetch the page HTML
2. Extract and clean the article content
3. Convert the content to Markdown via the LLM provider
4. Assemble the final Post

Each invocation is independent. Any stage failure ends the run in the
FAILED state and is reported through ``Post.error``; nothing is raised to
the caller.
"""

from __future__ import annotations

import asyncio
from enum import Enum
import logging

import httpx

from .config import AppConfig
from .core.assembler import assemble_post, failed_post
from .core.types import Post
from .errors import ConversionError, UninewsError
from .fetch.extractor import extract_content
from .fetch.fetcher import fetch_url
from .llm.providers.base import MarkdownProvider
from .llm.providers.factory import create_provider
from .llm.requestor import MarkdownRequestor
from .llm.tracing import record_span_error, set_span_output, start_span
from .logging_utils import get_logger, log_event


class ScrapeStage(str, Enum):
    START = "start"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    CONVERTING = "converting"
    ASSEMBLED = "assembled"
    FAILED = "failed"


class _StageTracker:
    """Records the per-invocation state machine and logs each transition."""

    def __init__(self, logger: logging.Logger, url: str):
        self.logger = logger
        self.url = url
        self.stage = ScrapeStage.START
        self.history = [ScrapeStage.START]

    def advance(self, stage: ScrapeStage) -> None:
        log_event(
            self.logger,
            f"Scrape {stage.value}",
            event="scrape_stage",
            url=self.url,
            from_stage=self.stage.value,
            to_stage=stage.value,
        )
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: str) -> None:
        log_event(
            self.logger,
            f"Scrape failed while {self.stage.value}: {error}",
            level=logging.WARNING,
            event="scrape_failed",
            url=self.url,
            from_stage=self.stage.value,
            error=error,
        )
        self.stage = ScrapeStage.FAILED
        self.history.append(ScrapeStage.FAILED)


async def scrape(
    url: str,
    language: str = "english",
    cfg: AppConfig | None = None,
    provider: MarkdownProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> Post:
    """Scrape ``url`` and return its article as a Markdown Post.

    Args:
        url: Article URL
        language: Target language of the Markdown output
        cfg: Application configuration (defaults when None)
        provider: Prebuilt LLM provider; built from ``cfg.provider`` when None
        transport: Optional httpx transport shared by the fetch and LLM calls
        logger: Logger for stage events (the ``uninews`` logger when None)

    Returns:
        A Post; check ``post.error`` before using the other fields
    """
    cfg = cfg or AppConfig()
    logger = logger or get_logger()
    tracker = _StageTracker(logger, url)

    with start_span(
        "uninews.scrape",
        kind="chain",
        input_value={"url": url, "language": language},
    ) as run_span:
        try:
            tracker.advance(ScrapeStage.FETCHING)
            with start_span("uninews.fetch", kind="retriever", input_value=url):
                fetched = await fetch_url(url, cfg.fetch, transport=transport)

            tracker.advance(ScrapeStage.EXTRACTING)
            with start_span("uninews.extract", kind="chain") as extract_span:
                extracted = extract_content(fetched.text, cfg.extract, base_url=fetched.url)
                set_span_output(
                    extract_span,
                    {"root": extracted.root_selector, "chars": len(extracted.html)},
                )
            log_event(
                logger,
                "Extracted content",
                event="extracted",
                url=url,
                root=extracted.root_selector,
                chars=len(extracted.html),
            )

            tracker.advance(ScrapeStage.CONVERTING)
            if provider is None:
                provider = _build_provider(cfg, transport)
            requestor = MarkdownRequestor(
                provider,
                cfg.request,
                retries=cfg.provider.retries,
                logger=logger,
            )
            markdown = await requestor.to_markdown(extracted, language)
        except UninewsError as exc:
            record_span_error(run_span, exc)
            tracker.fail(str(exc))
            return failed_post(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while %s %s", tracker.stage.value, url)
            record_span_error(run_span, exc)
            message = f"Unexpected error: {type(exc).__name__}: {exc}"
            tracker.fail(message)
            return failed_post(message)

        post = assemble_post(extracted, markdown)
        if post.error:
            tracker.fail(post.error)
        else:
            tracker.advance(ScrapeStage.ASSEMBLED)
        set_span_output(run_span, post.to_dict())
        return post


def universal_scrape(url: str, language: str = "english", cfg: AppConfig | None = None) -> Post:
    """Synchronous entry point: scrape ``url`` and return a Post.

    Runs its own event loop, so it must not be called from inside a
    running loop; use ``await scrape(...)`` there instead.
    """
    return asyncio.run(scrape(url, language, cfg))


def _build_provider(cfg: AppConfig, transport: httpx.AsyncBaseTransport | None) -> MarkdownProvider:
    try:
        return create_provider(cfg.provider, transport=transport)
    except ValueError as exc:
        raise ConversionError(str(exc)) from exc
