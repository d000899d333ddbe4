"""OpenAI (and OpenAI-compatible) chat completions provider."""

from __future__ import annotations

from typing import Any

from ..prompts import MarkdownRequest, build_system_prompt, build_user_prompt
from .base import MarkdownProvider


class OpenAICompatibleProvider(MarkdownProvider):
    """Talks to any server implementing ``POST /chat/completions``."""

    name = "openai"
    default_base_url = "https://api.openai.com/v1"

    async def convert(self, request: MarkdownRequest) -> str:
        payload = {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(request)},
                {"role": "user", "content": build_user_prompt(request)},
            ],
        }
        if self.cfg.temperature is not None:
            payload["temperature"] = self.cfg.temperature
        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = await self._post(f"{self.base_url}/chat/completions", payload, headers=headers)
        return _extract_text(data)


def _extract_text(data: dict[str, Any]) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ValueError(f"Unexpected response shape: {exc!r}") from exc
    if isinstance(content, list):
        # Some compatible servers return content parts instead of a string
        content = "".join(part.get("text", "") for part in content if isinstance(part, dict))
    return content or ""
