"""LLM conversion and observability."""

from .prompts import MarkdownRequest
from .providers import (
    GeminiProvider,
    MarkdownProvider,
    OpenAICompatibleProvider,
    available_providers,
    create_provider,
)
from .requestor import MarkdownRequestor
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "MarkdownRequest",
    "MarkdownRequestor",
    "MarkdownProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "create_provider",
    "available_providers",
    "setup_langfuse",
    "flush",
    "start_span",
    "set_span_output",
    "record_span_error",
]
