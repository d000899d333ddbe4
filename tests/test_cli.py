"""Tests for the Typer command-line interface."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from uninews import cli
from uninews.core.types import Post


runner = CliRunner()


def _fake_scrape(post: Post, calls: list):
    def fake(url, language, cfg):
        calls.append({"url": url, "language": language, "cfg": cfg})
        return post

    return fake


def test_success_prints_title_and_markdown(monkeypatch):
    calls: list = []
    post = Post(title="Breaking News", content="# Heading\n\nBody text")
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(post, calls))

    result = runner.invoke(cli.app, ["https://news.example.com/story"])

    assert result.exit_code == 0
    assert result.stdout == "Breaking News\n\n# Heading\n\nBody text\n"
    assert calls[0]["url"] == "https://news.example.com/story"
    assert calls[0]["language"] == "english"


def test_language_flag_is_forwarded(monkeypatch):
    calls: list = []
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(Post(title="T", content="C"), calls))

    result = runner.invoke(cli.app, ["https://news.example.com/story", "-l", "spanish"])

    assert result.exit_code == 0
    assert calls[0]["language"] == "spanish"


def test_json_flag_prints_post_as_json(monkeypatch):
    post = Post(title="T", content="C", image_url="https://news.example.com/i.png", author="Jane")
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(post, []))

    result = runner.invoke(cli.app, ["https://news.example.com/story", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["title"] == "T"
    assert data["featured_image_url"] == "https://news.example.com/i.png"
    assert "image_url" not in data
    assert data["author"] == "Jane"
    assert data["error"] == ""


def test_failure_exits_non_zero_and_reports_error(monkeypatch):
    post = Post(error="Failed to fetch URL: connection refused")
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(post, []))

    result = runner.invoke(cli.app, ["https://news.example.com/story"])

    assert result.exit_code == 1
    assert "Failed to fetch URL: connection refused" in result.output


def test_provider_overrides_and_config_file_are_applied(monkeypatch, tmp_path):
    config_path = tmp_path / "uninews.yaml"
    config_path.write_text(
        "provider:\n  model: gpt-4o-mini\n  retries: 3\nfetch:\n  timeout_seconds: 5\n",
        encoding="utf-8",
    )
    calls: list = []
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(Post(title="T", content="C"), calls))

    result = runner.invoke(
        cli.app,
        [
            "https://news.example.com/story",
            "--config",
            str(config_path),
            "--provider",
            "gemini",
            "--timeout",
            "9",
        ],
    )

    assert result.exit_code == 0
    cfg = calls[0]["cfg"]
    assert cfg.provider.name == "gemini"
    assert cfg.provider.model == "gpt-4o-mini"
    assert cfg.provider.retries == 3
    assert cfg.fetch.timeout_seconds == 9
    assert cfg.provider.timeout_seconds == 9


def test_invalid_config_exits_with_usage_error(monkeypatch, tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("provider:\n  modle: typo\n", encoding="utf-8")
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(Post(title="T", content="C"), []))

    result = runner.invoke(cli.app, ["https://news.example.com/story", "-c", str(config_path)])

    assert result.exit_code == 2
    assert "modle" in result.output


def test_malformed_yaml_config_exits_with_usage_error(monkeypatch, tmp_path):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("provider: [unclosed\n", encoding="utf-8")
    calls: list = []
    monkeypatch.setattr(cli, "universal_scrape", _fake_scrape(Post(title="T", content="C"), calls))

    result = runner.invoke(cli.app, ["https://news.example.com/story", "-c", str(config_path)])

    assert result.exit_code == 2
    assert calls == []
