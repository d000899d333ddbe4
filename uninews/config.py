"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- ExtractConfig: Article root selection and noise removal
- RequestConfig: What gets sent to the language model
- ProviderConfig: LLM provider settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


DEFAULT_NOISE_TAGS = [
    "script",
    "style",
    "noscript",
    "iframe",
    "header",
    "footer",
    "nav",
    "aside",
    "form",
    "input",
    "button",
    "select",
    "textarea",
    "svg",
    "source",
    "template",
    "canvas",
    "object",
    "embed",
]

DEFAULT_NOISE_SELECTORS = [
    "[class*=advert]",
    "[id*=advert]",
    "[class~=ad]",
    "[class~=ads]",
    "[class*=sponsor]",
    "[class*=promo]",
    "[class*=newsletter]",
    "[class*=share]",
    "[class*=social]",
    "[class*=related]",
    "[class*=comments]",
    "[id*=comments]",
    "[role=navigation]",
    "[role=complementary]",
    "[aria-hidden=true]",
]


@dataclass
class FetchConfig:
    """Configuration for HTTP content fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts after the first failure (0 = single attempt)
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class ExtractConfig:
    """Configuration for HTML content extraction.

    Attributes:
        parser: BeautifulSoup parser name ("html.parser" does not invent a <body>)
        root_selectors: CSS selectors tried in order to locate the article root
        noise_tags: Tag names removed from the chosen root
        noise_selectors: CSS selectors whose matches are removed from the chosen root
        keep_attributes: Attributes kept on serialized elements
        fallback: Extractors tried on the raw HTML when every root cleans to nothing
    """

    parser: str = "html.parser"
    root_selectors: list[str] = field(default_factory=lambda: ["article", "body"])
    noise_tags: list[str] = field(default_factory=lambda: list(DEFAULT_NOISE_TAGS))
    noise_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_NOISE_SELECTORS))
    keep_attributes: list[str] = field(default_factory=lambda: ["href", "src", "alt", "title"])
    fallback: list[str] = field(default_factory=lambda: ["readability", "trafilatura"])


@dataclass
class RequestConfig:
    """Configuration for the Markdown request sent to the LLM.

    Attributes:
        default_language: Language used when the caller passes an empty one
        max_chars: Maximum characters of cleaned HTML sent to the LLM
    """

    default_language: str = "english"
    max_chars: int = 120000


@dataclass
class ProviderConfig:
    """Configuration for LLM provider.

    Attributes:
        name: Provider name ("openai", "openai_compatible", or "gemini")
        model: Model identifier (e.g., "gpt-4o")
        api_key_env: Environment variable holding the API key (provider default when None)
        base_url: Base URL for the provider API (provider default when None)
        api_key: Optional inline API key (overrides env var)
        timeout_seconds: Request timeout for the provider API
        retries: Number of retry attempts after the first failure
        temperature: Sampling temperature; omitted from requests when None
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openai"
    model: str = "gpt-4o"
    api_key_env: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 120.0
    retries: int = 1
    temperature: float | None = 0.2
    trust_env: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Optional path of a log file; no file logging when unset
        format: Log file format ("jsonl" or "plain")
    """

    level: str = "WARNING"
    console: bool = True
    file: str | None = None
    format: str = "jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    request: RequestConfig = field(default_factory=RequestConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS: dict[str, type] = {
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "request": RequestConfig,
    "provider": ProviderConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections are ignored; unknown keys inside a known section are
    rejected so typos do not silently fall back to defaults.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if not isinstance(value, dict):
            raise ValueError(f"Config section '{key}' must be a mapping")
        unknown = set(value) - set(data[key])
        if unknown:
            raise ValueError(f"Unknown keys in '{key}' config: {', '.join(sorted(unknown))}")
        data[key].update(value)
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(api_key_env_name(cfg))


def api_key_env_name(cfg: ProviderConfig) -> str:
    """Name of the environment variable the API key is read from."""
    if cfg.api_key_env:
        return cfg.api_key_env
    defaults = {
        "gemini": "GOOGLE_API_KEY",
        "openai": "OPEN_AI_SECRET",
        "openai_compatible": "OPEN_AI_SECRET",
        "openai-compatible": "OPEN_AI_SECRET",
    }
    return defaults.get(cfg.name.lower().strip(), "OPEN_AI_SECRET")
