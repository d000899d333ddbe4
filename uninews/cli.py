"""
Command-line interface for Uninews.

Uses Typer to scrape a single article URL and print it as Markdown.
Supports loading .env files for API key configuration.
"""

from __future__ import annotations

import json
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
import typer

from .config import load_config
from .llm.tracing import flush, setup_langfuse
from .logging_utils import setup_logging
from .runner import universal_scrape

app = typer.Typer(
    add_completion=False,
    help="A universal news scraper that converts articles to Markdown.",
)
err_console = Console(stderr=True)


@app.command()
def main(
    url: str = typer.Argument(..., help="The URL of the news article to scrape."),
    language: str = typer.Option(
        "english", "--language", "-l", help="Target language for the Markdown output."
    ),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Print the scraped post as pretty JSON."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, readable=True,
        help="Optional YAML config file.",
    ),
    provider: str | None = typer.Option(
        None, "--provider", help="LLM provider: openai, openai_compatible or gemini."
    ),
    model: str | None = typer.Option(None, "--model", help="LLM model identifier."),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Timeout in seconds for both the fetch and the LLM call."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Scrape URL and print its title and Markdown content.

    Requires OPEN_AI_SECRET (GOOGLE_API_KEY for gemini) or the variable named
    in the provider config. Exits with status 1 when scraping fails.
    """
    # Load environment variables from .env if available
    load_dotenv()

    try:
        cfg = load_config(str(config) if config else None)
    except ValueError as exc:
        err_console.print(f"Invalid config: {exc}", style="red", markup=False)
        raise typer.Exit(code=2) from exc

    # Override with CLI options
    if provider:
        cfg.provider.name = provider
    if model:
        cfg.provider.model = model
    if timeout is not None:
        cfg.fetch.timeout_seconds = timeout
        cfg.provider.timeout_seconds = timeout
    if log_level:
        cfg.logging.level = log_level

    setup_logging(cfg.logging, console=err_console)
    setup_langfuse(cfg.langfuse)

    try:
        post = universal_scrape(url, language, cfg)
    finally:
        # Flush Langfuse traces before exit
        flush()

    if post.error:
        err_console.print(f"Error during scraping: {post.error}", style="red", markup=False)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(post.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(f"{post.title}\n\n{post.content}")


if __name__ == "__main__":
    app()
