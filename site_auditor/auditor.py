# site_auditor/auditor.py
"""
Auditor: ties the registry, pipeline, scorer and crawler together.

- run_single_page(context): pipeline + scorer on one prepared context.
- audit_url(url): fetch one page, then run_single_page. A failed fetch raises.
- run_crawl(seed, max_pages, concurrency): crawl, run the pipeline on every
  page that fetched, pool results per category across pages, score.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Sequence

from site_auditor.categories import (
    DEFAULT_CATEGORIES,
    select_categories,
    validate_category_weights,
)
from site_auditor.crawler import Crawler
from site_auditor.errors import ConfigurationError
from site_auditor.fetcher import Fetcher, HttpFetcher
from site_auditor.models import (
    AuditContext,
    AuditResult,
    CategoryDefinition,
    CategoryResult,
)
from site_auditor.observer import AuditObserver, notify
from site_auditor.pipeline import DEFAULT_RULE_TIMEOUT, AuditPipeline
from site_auditor.registry import RuleRegistry
from site_auditor.scoring import build_audit_result, pool_results, score_pooled

log = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class Auditor:
    """
    Runs audits against a fixed registry and category catalog.

    Configuration is checked here, before any audit can run: the catalog's
    weights must sum to 100, every selected category must exist, and every
    registered rule must belong to a known category.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        *,
        categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
        selected: Iterable[str] | None = None,
        observer: AuditObserver | None = None,
        config: Dict[str, Any] | None = None,
        fetcher: Fetcher | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ):
        validate_category_weights(categories)
        known = {cat.id for cat in categories}
        orphans = sorted(cat for cat in registry.categories() if cat not in known)
        if orphans:
            raise ConfigurationError(f"Rules registered under unknown categories: {orphans}")

        self.registry = registry
        self.all_categories = list(categories)
        self.categories = select_categories(categories, selected)
        self.observer = observer
        self.config = dict(config or {})
        self.fetcher = fetcher
        self.clock = clock
        self.timeout = float(self.config.get("timeout", 30.0))
        self.pipeline = AuditPipeline(
            registry,
            self.categories,
            observer=observer,
            rule_timeout=float(self.config.get("rule_timeout", DEFAULT_RULE_TIMEOUT)),
        )
        log.debug(
            "Auditor ready: %d rules, categories=%s",
            len(registry),
            [c.id for c in self.categories],
        )

    async def run_single_page(self, context: AuditContext) -> AuditResult:
        category_results = await self.pipeline.run_categories(context)
        notify(self.observer, "on_page_complete", context.url, 1, 1)
        return build_audit_result(
            context.url,
            category_results,
            self.categories,
            self.clock(),
            crawled_pages=1,
        )

    async def audit_url(self, url: str) -> AuditResult:
        """Fetch and audit one page. Raises FetchError if the page cannot be fetched."""
        log.info("Auditing single page: %s", url)
        if self.fetcher is not None:
            context = await self.fetcher.fetch(url, self.timeout)
        else:
            async with HttpFetcher(self.config) as fetcher:
                context = await fetcher.fetch(url, self.timeout)
        return await self.run_single_page(context)

    async def run_crawl(
        self,
        seed_url: str,
        max_pages: int = 10,
        concurrency: int = 3,
    ) -> AuditResult:
        """
        Crawl from `seed_url` and audit every page that fetched.

        Always returns a best-effort result; errored pages add nothing to the
        scores and are listed in `errors`. `crawled_pages` counts the pages
        the scores were computed over.
        """
        log.info(
            "Auditing site: %s (max_pages=%d, concurrency=%d)", seed_url, max_pages, concurrency
        )
        per_page: Dict[str, List[CategoryResult]] = {}
        page_number = 0

        async with Crawler(
            seed_url,
            max_pages=max_pages,
            concurrency=concurrency,
            config=self.config,
            fetcher=self.fetcher,
        ) as crawler:
            async for page in crawler.crawl():
                page_number += 1
                if page.context is None:
                    notify(
                        self.observer,
                        "on_page_complete",
                        page.url,
                        page_number,
                        max_pages,
                        error=page.error,
                    )
                    continue
                per_page[page.url] = await self.pipeline.run_categories(page.context)
                notify(self.observer, "on_page_complete", page.url, page_number, max_pages)
            # Pool in discovery order, not completion order, so output is reproducible.
            ordered = [per_page[url] for url in crawler.discovered if url in per_page]
            errors = sorted(crawler.errors)

        pooled = pool_results(ordered, self.categories)
        category_results = score_pooled(pooled, self.categories, self.pipeline.rule_weights())
        return build_audit_result(
            seed_url,
            category_results,
            self.categories,
            self.clock(),
            crawled_pages=len(per_page),
            errors=errors,
        )

    def describe(self) -> List[Dict[str, Any]]:
        """Selected categories with their rule counts, for listings."""
        return [
            {
                "id": cat.id,
                "name": cat.name,
                "weight": cat.weight,
                "rules": len(self.registry.rules_by_category(cat.id)),
            }
            for cat in self.categories
        ]
