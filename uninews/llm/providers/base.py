"""Abstract interface for LLM-backed Markdown conversion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from ...config import ProviderConfig, api_key_env_name
from ...errors import ConversionError
from ..prompts import MarkdownRequest


class MarkdownProvider(ABC):
    """Provider interface: cleaned article in, Markdown text out."""

    name = "base"
    default_base_url = ""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ConversionError(f"Please set the {api_key_env_name(cfg)} environment variable.")
        self.cfg = cfg
        self.api_key = api_key
        self.transport = transport

    @property
    def base_url(self) -> str:
        return (self.cfg.base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    async def convert(self, request: MarkdownRequest) -> str:
        """Return the Markdown rendition of ``request``.

        Implementations raise ``httpx.HTTPError`` for transport/status
        failures and ``ValueError`` for unusable responses.
        """
        raise NotImplementedError

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        ) as client:
            resp = await client.post(url, json=payload, headers=headers, params=params)
            resp.raise_for_status()
            return resp.json()
