# site_auditor/api.py
# The primary, programmer-facing API for the library.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from site_auditor.auditor import Auditor
from site_auditor.config import categories_from_config, load_config
from site_auditor.models import AuditResult
from site_auditor.observer import AuditObserver
from site_auditor.rules import build_default_registry

log = logging.getLogger(__name__)


def build_auditor(
    config: Dict[str, Any],
    *,
    observer: AuditObserver | None = None,
) -> Auditor:
    """Create an Auditor from a loaded config and the default rule catalog."""
    return Auditor(
        build_default_registry(),
        categories=categories_from_config(config),
        selected=config.get("categories") or None,
        observer=observer,
        config=config,
    )


def _apply_overrides(config: Dict[str, Any], **overrides: Any) -> Dict[str, Any]:
    for key, value in overrides.items():
        if value is None:
            continue
        config[key] = value
        log.info("Applied override - %s set to: %s", key, value)
    return config


async def audit(
    url: str,
    *,
    categories: List[str] | None = None,
    timeout: float | None = None,
    observer: AuditObserver | None = None,
    pyproject_path: Path | None = None,
) -> AuditResult:
    """
    Audit a single page.

    Args:
        url: The page to audit.
        categories: Category ids to run; empty or None means all.
        timeout: Fetch timeout in seconds, overriding config.
        observer: Optional progress observer.
        pyproject_path: Where to read `[tool.site_auditor]` from.

    Returns:
        An AuditResult with crawled_pages == 1.

    Raises:
        FetchError: the page could not be fetched.
        ConfigurationError: invalid categories or weights.
    """
    log.info("Starting single-page audit for: %s", url)
    config = _apply_overrides(
        load_config(pyproject_path), categories=categories or None, timeout=timeout
    )
    auditor = build_auditor(config, observer=observer)
    result = await auditor.audit_url(url)
    log.info("Audit complete. Overall score: %d", result.overall_score)
    return result


async def audit_site(
    url: str,
    *,
    max_pages: int | None = None,
    concurrency: int | None = None,
    categories: List[str] | None = None,
    timeout: float | None = None,
    crawl_timeout: float | None = None,
    observer: AuditObserver | None = None,
    pyproject_path: Path | None = None,
) -> AuditResult:
    """
    Crawl a site from `url` and audit every page reached.

    Scores pool every page's rule results per category. Pages that fail to
    fetch are skipped and listed in `AuditResult.errors`.
    """
    log.info("Starting crawl audit for: %s", url)
    config = _apply_overrides(
        load_config(pyproject_path),
        max_pages=max_pages,
        concurrency=concurrency,
        categories=categories or None,
        timeout=timeout,
        crawl_timeout=crawl_timeout,
    )
    auditor = build_auditor(config, observer=observer)
    result = await auditor.run_crawl(
        url, max_pages=int(config["max_pages"]), concurrency=int(config["concurrency"])
    )
    log.info(
        "Crawl audit complete. %d page(s), overall score: %d",
        result.crawled_pages,
        result.overall_score,
    )
    return result
