"""Tests for logging setup and Langfuse tracing behavior."""

from __future__ import annotations

from contextlib import contextmanager
import json
import sys
import types

from uninews.config import LangfuseConfig, LoggingConfig
from uninews.llm import tracing
from uninews.logging_utils import log_event, redact_text, setup_logging, truncate_text


def test_jsonl_file_logging_includes_event_fields(tmp_path):
    log_path = tmp_path / "logs" / "uninews.jsonl"
    logger = setup_logging(LoggingConfig(level="INFO", console=False, file=str(log_path)))

    log_event(logger, "Scrape fetching", event="scrape_stage", url="https://news.example.com/a")
    for handler in logger.handlers:
        handler.flush()

    record = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
    assert record["message"] == "Scrape fetching"
    assert record["event"] == "scrape_stage"
    assert record["url"] == "https://news.example.com/a"
    assert record["level"] == "INFO"
    assert not {"lineno", "levelno", "taskName", "args"} & set(record)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


def test_redact_and_truncate_helpers():
    assert redact_text("see https://x.example.com/a now", "redact_urls") == "see [REDACTED_URL] now"
    assert redact_text("keep", "none") == "keep"
    assert truncate_text("abcdef", 3) == "abc...(truncated)"


def test_setup_langfuse_passes_keys_from_env(monkeypatch):
    captured: dict = {}

    class DummyLangfuse:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.setattr(tracing, "_TRACER", None)
    monkeypatch.setattr(tracing, "_CFG", None)
    monkeypatch.setitem(sys.modules, "langfuse", types.SimpleNamespace(Langfuse=DummyLangfuse))
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-test")
    monkeypatch.setenv("LANGFUSE_HOST", "https://cloud.langfuse.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert captured == {
        "public_key": "pk-test",
        "secret_key": "sk-test",
        "host": "https://cloud.langfuse.com",
    }
    assert isinstance(tracing._TRACER, DummyLangfuse)


def test_setup_langfuse_disables_tracer_when_keys_missing(monkeypatch):
    monkeypatch.setattr(tracing, "_TRACER", None)
    monkeypatch.setattr(tracing, "_CFG", None)
    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("LANGFUSE_SECRET_KEY", raising=False)

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert tracing._TRACER is None


def test_start_span_is_noop_without_tracer(monkeypatch):
    monkeypatch.setattr(tracing, "_TRACER", None)

    with tracing.start_span("uninews.fetch", kind="retriever", input_value="x") as span:
        assert span is None
    tracing.set_span_output(span, "ignored")


def test_span_output_is_redacted_and_truncated(monkeypatch):
    updates: list[dict] = []

    class DummySpan:
        def update(self, **kwargs):
            updates.append(kwargs)

    class DummyTracer:
        @contextmanager
        def start_as_current_span(self, name, input=None, metadata=None):  # noqa: A002
            updates.append({"name": name, "input": input, "metadata": metadata})
            yield DummySpan()

    monkeypatch.setattr(tracing, "_TRACER", DummyTracer())
    monkeypatch.setattr(tracing, "_CFG", LangfuseConfig(enabled=True, max_text_chars=16))

    with tracing.start_span("uninews.scrape", kind="chain", input_value="https://news.example.com/a") as span:
        tracing.set_span_output(span, "0123456789abcdefXYZ")

    assert updates[0]["name"] == "uninews.scrape"
    assert updates[0]["input"] == "[REDACTED_URL]"
    assert updates[0]["metadata"] == {"span.kind": "chain"}
    assert updates[1] == {"output": "0123456789abcdef...(truncated)"}
