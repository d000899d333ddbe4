"""Tests for MarkdownRequestor request building, retries and error mapping."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from uninews.config import ProviderConfig, RequestConfig
from uninews.core.types import ExtractedContent
from uninews.errors import ConversionError
from uninews.llm.prompts import MarkdownRequest, build_system_prompt, build_user_prompt
from uninews.llm.providers.base import MarkdownProvider
from uninews.llm.requestor import MarkdownRequestor


class _ScriptedProvider(MarkdownProvider):
    """Provider stub that replays a list of results or exceptions."""

    name = "scripted"

    def __init__(self, outcomes):
        super().__init__(ProviderConfig(model="stub-model"), "test-key")
        self.outcomes = list(outcomes)
        self.requests: list[MarkdownRequest] = []

    async def convert(self, request: MarkdownRequest) -> str:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _status_error(status: int, body: dict | None = None) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://llm.example.com/chat/completions")
    response = httpx.Response(status, json=body or {}, request=request)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


def _extracted(html: str = "<p>Body</p>") -> ExtractedContent:
    return ExtractedContent(
        html=html,
        title="Title",
        image_url="https://news.example.com/hero.png",
        author="Jane Doe",
    )


def test_request_carries_content_and_metadata():
    provider = _ScriptedProvider(["# Title"])
    requestor = MarkdownRequestor(provider)

    markdown = asyncio.run(requestor.to_markdown(_extracted(), "french"))

    assert markdown == "# Title"
    request = provider.requests[0]
    assert request.content == "<p>Body</p>"
    assert request.language == "french"
    assert request.title == "Title"
    assert request.image_url == "https://news.example.com/hero.png"
    assert request.author == "Jane Doe"


@pytest.mark.parametrize("language", ["", "   ", None])
def test_blank_language_defaults_to_english(language):
    requestor = MarkdownRequestor(_ScriptedProvider([]))

    request = requestor.build_request(_extracted(), language)

    assert request.language == "english"


def test_content_is_truncated_to_max_chars():
    requestor = MarkdownRequestor(_ScriptedProvider([]), RequestConfig(max_chars=5))

    request = requestor.build_request(_extracted("<p>long content</p>"), "english")

    assert request.content == "<p>lo"


def test_transient_failures_are_retried():
    provider = _ScriptedProvider([_status_error(503), "# Recovered"])
    requestor = MarkdownRequestor(provider, retries=1)

    assert asyncio.run(requestor.to_markdown(_extracted())) == "# Recovered"
    assert len(provider.requests) == 2


def test_auth_failure_is_not_retried_and_maps_to_conversion_error():
    provider = _ScriptedProvider(
        [_status_error(401, {"error": {"message": "Incorrect API key provided"}}), "# never"]
    )
    requestor = MarkdownRequestor(provider, retries=3)

    with pytest.raises(ConversionError) as excinfo:
        asyncio.run(requestor.to_markdown(_extracted()))

    assert str(excinfo.value).startswith("LLM Error: HTTP 401")
    assert "Incorrect API key provided" in str(excinfo.value)
    assert len(provider.requests) == 1


def test_transport_failure_surfaces_after_retries_are_exhausted():
    request = httpx.Request("POST", "https://llm.example.com/chat/completions")
    provider = _ScriptedProvider(
        [httpx.ConnectError("down", request=request), httpx.ConnectError("still down", request=request)]
    )
    requestor = MarkdownRequestor(provider, retries=1)

    with pytest.raises(ConversionError, match="LLM Error: ConnectError: still down"):
        asyncio.run(requestor.to_markdown(_extracted()))
    assert len(provider.requests) == 2


def test_malformed_response_maps_to_conversion_error():
    provider = _ScriptedProvider([ValueError("Unexpected response shape")])
    requestor = MarkdownRequestor(provider, retries=2)

    with pytest.raises(ConversionError, match="LLM Error: Unexpected response shape"):
        asyncio.run(requestor.to_markdown(_extracted()))
    assert len(provider.requests) == 1


def test_prompts_carry_language_and_post_json():
    request = MarkdownRequest(
        content="<p>Café {braces}</p>",
        language="german",
        title="Title",
        image_url="https://news.example.com/hero.png",
    )

    system = build_system_prompt(request)
    user = build_user_prompt(request)

    assert "german" in system
    assert "{language}" not in system
    assert "in german language" in user
    post = json.loads(user[user.index("{"):])
    assert post["content"] == "<p>Café {braces}</p>"
    assert post["featured_image_url"] == "https://news.example.com/hero.png"
    assert post["author"] is None
