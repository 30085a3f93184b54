# site_auditor/crawler.py
"""
Same-site crawler with bounded concurrency.

Responsibilities:
- Discover pages reachable from a seed URL, staying on the seed's site.
- Fetch at most `max_pages` of them, at most `concurrency` at a time.
- Stream every outcome as a CrawledPage; a page that fails to fetch is an
  errored CrawledPage, never an exception out of `crawl()`.

Traversal is breadth-first, one level at a time. A level's fetches run
concurrently and are yielded as they complete. Once a level has drained, the
next level is built by walking the successful pages in level order and their
links in document order, discovering each new in-scope URL until the
discovered count reaches `max_pages`. Because discovery only happens between
levels, in that fixed order, the set of pages crawled depends on the link
graph and the cap, never on which fetch finished first.

Frontier and visited state are only touched by the coroutine running
`crawl()`; fetch tasks report back through their return value.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Set

import httpx

from site_auditor.errors import ConfigurationError, FetchError
from site_auditor.fetcher import Fetcher, HttpFetcher
from site_auditor.models import CrawledPage
from site_auditor.urls import (
    is_probably_html_url,
    is_same_site,
    matches_any,
    normalize_url,
)

log = logging.getLogger(__name__)


@dataclass
class Crawler:
    """
    Crawl a site starting from `seed_url`.

    Pass a `fetcher` to use your own fetch collaborator; otherwise an
    HttpFetcher is created (and closed) by `async with Crawler(...)`.

    Config keys consumed when no explicit argument is given:
      - timeout: float (seconds, per fetch)
      - crawl_timeout: float | None (seconds, whole crawl)
      - use_registrable_domain: bool
      - exclude: list[str] (fnmatch patterns on host / host+path)
      - user_agent, max_redirects: passed to HttpFetcher
    """

    seed_url: str
    max_pages: int = 10
    concurrency: int = 3
    config: Dict[str, Any] = field(default_factory=dict)
    fetcher: Optional[Fetcher] = None

    # Internal state
    discovered: List[str] = field(default_factory=list)
    pages: List[CrawledPage] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    _discovered_set: Set[str] = field(default_factory=set, init=False, repr=False)
    _owned_fetcher: Optional[HttpFetcher] = field(default=None, init=False, repr=False)
    normalized_seed_url: str = field(init=False)

    def __post_init__(self) -> None:
        if self.max_pages < 1:
            raise ConfigurationError(f"max_pages must be at least 1, got {self.max_pages}")
        if self.concurrency < 1:
            raise ConfigurationError(
                f"concurrency must be at least 1, got {self.concurrency}"
            )
        self.normalized_seed_url = normalize_url(self.seed_url)
        self.timeout = float(self.config.get("timeout", 30.0))
        crawl_timeout = self.config.get("crawl_timeout")
        self.crawl_timeout = float(crawl_timeout) if crawl_timeout else None
        self.use_registrable_domain = bool(self.config.get("use_registrable_domain", False))
        self.exclude = list(self.config.get("exclude", []))

    async def __aenter__(self) -> "Crawler":
        if self.fetcher is None:
            self._owned_fetcher = HttpFetcher(self.config)
            self.fetcher = await self._owned_fetcher.__aenter__()
        log.info("Crawler ready. Seed: %s", self.normalized_seed_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owned_fetcher is not None:
            await self._owned_fetcher.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_fetcher = None
            self.fetcher = None

    def in_scope(self, url: str) -> bool:
        """True if `url` may be fetched: same site, page-like, not excluded."""
        if not is_probably_html_url(url):
            return False
        if not is_same_site(url, self.normalized_seed_url, self.use_registrable_domain):
            return False
        if self.exclude and matches_any(url, self.exclude):
            log.debug("Skipping excluded URL: %s", url)
            return False
        return True

    def _discover(self, url: str) -> bool:
        if url in self._discovered_set:
            return False
        self._discovered_set.add(url)
        self.discovered.append(url)
        return True

    async def _fetch_one(self, url: str, slots: asyncio.Semaphore) -> CrawledPage:
        """Fetch one URL inside a pool slot. Every failure becomes an errored page."""
        assert self.fetcher is not None
        async with slots:
            log.debug("Fetching %s", url)
            try:
                context = await asyncio.wait_for(
                    self.fetcher.fetch(url, self.timeout), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                msg = f"timed out after {self.timeout:g}s"
            except FetchError as e:
                msg = e.reason
            except httpx.HTTPError as e:
                msg = f"HTTP error: {e}"
            except Exception as e:
                # Recorded like any other fetch failure.
                log.error("Unexpected error fetching %s: %r", url, e, exc_info=True)
                msg = f"{type(e).__name__}: {e}"
            else:
                return CrawledPage(url=url, context=context)

        log.error("Error fetching %s: %s", url, msg)
        return CrawledPage(url=url, error=msg)

    def _next_level(self, level: List[str], outcomes: Dict[str, CrawledPage]) -> List[str]:
        """Discover the next level in (level order, link order) until the cap."""
        nxt: List[str] = []
        for url in level:
            page = outcomes.get(url)
            if page is None or not page.ok:
                continue
            assert page.context is not None
            for link in page.context.links:
                if len(self._discovered_set) >= self.max_pages:
                    return nxt
                candidate = normalize_url(link.href)
                if candidate in self._discovered_set or not self.in_scope(candidate):
                    continue
                self._discover(candidate)
                nxt.append(candidate)
        return nxt

    async def crawl(self) -> AsyncIterator[CrawledPage]:
        """Yield a CrawledPage per fetched URL, in completion order."""
        if self.fetcher is None:
            raise RuntimeError("No fetcher: pass one or use `async with Crawler(...)`")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.crawl_timeout if self.crawl_timeout else None
        slots = asyncio.Semaphore(self.concurrency)

        self._discover(self.normalized_seed_url)
        level = [self.normalized_seed_url]
        depth = 0

        while level:
            if deadline is not None and loop.time() >= deadline:
                log.warning(
                    "Crawl timeout reached after %d pages; %d discovered URLs not fetched",
                    len(self.pages),
                    len(level),
                )
                break

            log.info("Depth %d: fetching %d page(s)", depth, len(level))
            tasks = [asyncio.ensure_future(self._fetch_one(url, slots)) for url in level]
            outcomes: Dict[str, CrawledPage] = {}
            try:
                for next_done in asyncio.as_completed(tasks):
                    page = await next_done
                    outcomes[page.url] = page
                    self.pages.append(page)
                    if page.error:
                        self.errors.append(f"{page.url}: {page.error}")
                    yield page
            finally:
                pending = [t for t in tasks if not t.done()]
                if pending:
                    # Only reached when the consumer stops early or cancels us.
                    for t in pending:
                        t.cancel()
                    await asyncio.gather(*pending, return_exceptions=True)

            level = self._next_level(level, outcomes)
            depth += 1

        log.info(
            "Crawl complete: %d page(s), %d error(s)", len(self.pages), len(self.errors)
        )
