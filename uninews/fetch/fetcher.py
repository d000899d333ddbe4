"""
HTTP content fetching.

Downloads the raw HTML of an article page with httpx. A single attempt is
made by default; any transport error, timeout, or non-success status is
raised as a FetchError.
"""

from __future__ import annotations

from dataclasses import dataclass
import asyncio

import httpx

from ..config import FetchConfig
from ..errors import FetchError


@dataclass
class FetchResult:
    """Result of a successful HTTP fetch.

    Attributes:
        url: The final URL after redirects
        status_code: HTTP status code of the response
        text: The decoded response body
    """
    url: str
    status_code: int
    text: str


async def fetch_url(
    url: str,
    cfg: FetchConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Fetch a URL using httpx.

    Uses an async client that follows redirects and respects system proxy
    settings when trust_env is enabled.

    Args:
        url: The URL to fetch
        cfg: Fetch settings (timeout, retries, user agent, proxy handling)
        transport: Optional httpx transport, used by tests to stub the network

    Returns:
        FetchResult with the response body text

    Raises:
        FetchError: On network failure, timeout, non-2xx status or empty body
    """
    headers = {"User-Agent": cfg.user_agent}
    attempts = max(0, cfg.retries) + 1

    for attempt in range(attempts):
        try:
            async with httpx.AsyncClient(
                timeout=cfg.timeout_seconds,
                headers=headers,
                follow_redirects=True,
                trust_env=cfg.trust_env,
                transport=transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                text = resp.text
                if not text.strip():
                    raise FetchError(
                        f"Failed to fetch URL: empty response body from {url}",
                        url=url,
                        status_code=resp.status_code,
                    )
                return FetchResult(url=str(resp.url), status_code=resp.status_code, text=text)
        except httpx.InvalidURL as exc:
            raise FetchError(f"Failed to fetch URL: {_describe(exc)}", url=url) from exc
        except FetchError as exc:
            error = exc
        except httpx.HTTPStatusError as exc:
            error = FetchError(
                f"Failed to fetch URL: {_describe(exc)}",
                url=url,
                status_code=exc.response.status_code,
            )
        except httpx.HTTPError as exc:
            error = FetchError(f"Failed to fetch URL: {_describe(exc)}", url=url)

        if attempt == attempts - 1:
            raise error
        # Linear backoff: 0.5s, 1.0s, 1.5s...
        await asyncio.sleep(0.5 * (attempt + 1))


def _describe(exc: BaseException) -> str:
    """Render an exception and its chained causes as ``a => b => c``."""
    parts = [str(exc) or type(exc).__name__]
    cause = exc.__cause__ or exc.__context__
    seen = {id(exc)}
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        parts.append(str(cause) or type(cause).__name__)
        cause = cause.__cause__ or cause.__context__
    return " => ".join(parts)
