"""Google Gemini provider for Markdown conversion."""

from __future__ import annotations

from typing import Any

from ..prompts import MarkdownRequest, build_system_prompt, build_user_prompt
from .base import MarkdownProvider


class GeminiProvider(MarkdownProvider):
    """Gemini-backed provider using the ``generateContent`` REST endpoint."""

    name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com"

    async def convert(self, request: MarkdownRequest) -> str:
        payload = {
            "systemInstruction": {"parts": [{"text": build_system_prompt(request)}]},
            "contents": [{"role": "user", "parts": [{"text": build_user_prompt(request)}]}],
        }
        if self.cfg.temperature is not None:
            payload["generationConfig"] = {"temperature": self.cfg.temperature}
        url = f"{self.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        data = await self._post(url, payload, params={"key": self.api_key})
        return _extract_text(data)


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate, skipping thought parts.

    When a response only has thought parts, all of their text is used.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ValueError(f"Unexpected response shape: {exc!r}") from exc
    texts = [part.get("text", "") for part in parts if not part.get("thought")]
    if not any(texts):
        texts = [part.get("text", "") for part in parts]
    return "".join(texts)
