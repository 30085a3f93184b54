# site_auditor/fetcher.py
"""
HTTPX-based fetch collaborator.

Responsibilities:
- GET a page with redirects and a per-request timeout.
- Parse the body with BeautifulSoup.
- Build the immutable AuditContext the rules read, including the extracted
  link and image lists.

HTTP error statuses are not failures here: a 404 page is a valid context
with `status_code == 404`. Only network-level problems raise FetchError.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional, Protocol

import httpx
from bs4 import BeautifulSoup

from site_auditor.errors import FetchError
from site_auditor.models import AuditContext, CoreWebVitals, ImageInfo, LinkInfo
from site_auditor.urls import hostname, is_fetchable_url, resolve_href

log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SiteAuditorBot/0.1 (+https://pypi.org/project/site_auditor/)"
MAX_LINK_TEXT = 200


class Fetcher(Protocol):
    """Anything that can turn a URL into an AuditContext within a timeout."""

    async def fetch(self, url: str, timeout: float) -> AuditContext: ...


def extract_links(soup: BeautifulSoup, base_url: str) -> list[LinkInfo]:
    """Collect <a href> links in document order, resolved against the page URL."""
    links: list[LinkInfo] = []
    base_host = hostname(base_url)

    for tag in soup.find_all("a", href=True):
        resolved = resolve_href(base_url, tag.get("href"))
        if resolved is None:
            continue

        rel = tag.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        is_nofollow = "nofollow" in [r.lower() for r in rel]

        text = tag.get_text(" ", strip=True) or tag.get("title") or ""
        links.append(
            LinkInfo(
                href=resolved,
                text=str(text)[:MAX_LINK_TEXT],
                is_internal=hostname(resolved) == base_host,
                is_nofollow=is_nofollow,
            )
        )
    return links


def extract_images(soup: BeautifulSoup, base_url: str) -> list[ImageInfo]:
    images: list[ImageInfo] = []
    for tag in soup.find_all("img"):
        src = tag.get("src") or tag.get("data-src") or ""
        if not src or src.startswith("data:"):
            continue

        resolved = resolve_href(base_url, src) or src
        alt = tag.get("alt")
        images.append(
            ImageInfo(
                src=resolved,
                alt=alt or "",
                has_alt=alt is not None,
                width=tag.get("width"),
                height=tag.get("height"),
                is_lazy_loaded=tag.get("loading") == "lazy" or tag.has_attr("data-src"),
            )
        )
    return images


def build_context(
    url: str,
    html: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    status_code: int = 200,
    response_time: int = 0,
    cwv: Optional[CoreWebVitals] = None,
) -> AuditContext:
    """Parse `html` and assemble a complete AuditContext. No network access."""
    soup = BeautifulSoup(html, "html.parser")
    return AuditContext(
        url=url,
        html=html,
        soup=soup,
        headers=dict(headers or {}),
        status_code=status_code,
        response_time=response_time,
        cwv=cwv or CoreWebVitals(),
        links=tuple(extract_links(soup, url)),
        images=tuple(extract_images(soup, url)),
    )


class HttpFetcher:
    """
    Fetch pages with a shared httpx.AsyncClient.

    Use as an async context manager so the connection pool is closed:

        async with HttpFetcher(config) as fetcher:
            ctx = await fetcher.fetch("https://example.com", timeout=10)
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = dict(config or {})
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpFetcher":
        headers = {
            "User-Agent": self.config.get("user_agent", DEFAULT_USER_AGENT),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=int(self.config.get("max_redirects", 5)),
            timeout=float(self.config.get("timeout", 30.0)),
            headers=headers,
            transport=self._transport,
        )
        log.info("httpx session initialized.")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        log.info("httpx session closed.")

    async def fetch(self, url: str, timeout: float) -> AuditContext:
        if self._client is None:
            raise RuntimeError("HttpFetcher must be used as an async context manager")
        if not is_fetchable_url(url):
            raise FetchError(url, "scheme is not http/https")

        start = time.perf_counter()
        try:
            resp = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as e:
            log.error("Timeout fetching %s after %.1fs", url, timeout)
            raise FetchError(url, f"timed out after {timeout:g}s") from e
        except httpx.RequestError as e:
            log.error("Network error fetching %s: %s", url, e)
            raise FetchError(url, f"network error: {e}") from e
        except (httpx.InvalidURL, httpx.HTTPError) as e:
            log.error("Could not request %s: %s", url, e)
            raise FetchError(url, f"invalid request: {e}") from e

        response_time = round((time.perf_counter() - start) * 1000)
        if resp.status_code >= 400:
            log.warning("Non-2xx response for %s: %d", url, resp.status_code)

        return build_context(
            url,
            resp.text,
            headers=dict(resp.headers),
            status_code=resp.status_code,
            response_time=response_time,
        )
