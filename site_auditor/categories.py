# site_auditor/categories.py
"""
Default category catalog.

Weights are percentages and must sum to exactly 100. Any other total is a
configuration error: the overall score would silently mean something else.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from site_auditor.errors import ConfigurationError
from site_auditor.models import CategoryDefinition

log = logging.getLogger(__name__)

TOTAL_WEIGHT = 100

DEFAULT_CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        "core", "Core", "Meta tags, canonical, H1 and indexing directives", 14
    ),
    CategoryDefinition(
        "technical", "Technical SEO", "HTTP status, robots and other technical aspects", 8
    ),
    CategoryDefinition(
        "perf", "Performance", "Core Web Vitals and response performance hints", 14
    ),
    CategoryDefinition(
        "links", "Links", "Internal and external links, anchor text, nofollow usage", 9
    ),
    CategoryDefinition(
        "images", "Images", "Alt attributes, dimensions and lazy loading", 9
    ),
    CategoryDefinition(
        "security", "Security", "HTTPS, security headers and mixed content", 9
    ),
    CategoryDefinition(
        "crawl", "Crawlability", "Indexability signals and canonical consistency", 6
    ),
    CategoryDefinition(
        "schema", "Structured Data", "JSON-LD and Schema.org markup", 5
    ),
    CategoryDefinition(
        "a11y", "Accessibility", "Screen reader support and document semantics", 5
    ),
    CategoryDefinition(
        "content", "Content", "Text quality and heading structure", 5
    ),
    CategoryDefinition(
        "social", "Social", "Open Graph and Twitter Card metadata", 4
    ),
    CategoryDefinition(
        "eeat", "E-E-A-T", "Experience, expertise, authority and trust signals", 4
    ),
    CategoryDefinition(
        "url", "URL Structure", "URL formatting and slug hygiene", 3
    ),
    CategoryDefinition(
        "mobile", "Mobile", "Viewport and mobile-friendliness", 3
    ),
    CategoryDefinition(
        "i18n", "Internationalization", "Language declarations and hreflang", 1
    ),
    CategoryDefinition(
        "legal", "Legal Compliance", "Privacy policy and cookie consent signals", 1
    ),
)


def validate_category_weights(categories: Sequence[CategoryDefinition]) -> None:
    """Raise ConfigurationError unless ids are unique and weights sum to 100."""
    seen: set[str] = set()
    for cat in categories:
        if cat.id in seen:
            raise ConfigurationError(f"Duplicate category id: {cat.id}")
        seen.add(cat.id)
        if cat.weight < 0:
            raise ConfigurationError(
                f"Category {cat.id} has a negative weight ({cat.weight})"
            )

    total = sum(cat.weight for cat in categories)
    if total != TOTAL_WEIGHT:
        raise ConfigurationError(
            f"Category weights must sum to {TOTAL_WEIGHT}, got {total}"
        )


def get_category_by_id(
    category_id: str, categories: Iterable[CategoryDefinition] = DEFAULT_CATEGORIES
) -> CategoryDefinition | None:
    for cat in categories:
        if cat.id == category_id:
            return cat
    return None


def with_weight_overrides(
    categories: Sequence[CategoryDefinition], overrides: Mapping[str, int]
) -> list[CategoryDefinition]:
    """
    Return a copy of `categories` with weights replaced from `overrides`.

    The result is validated; overriding one weight without compensating
    elsewhere is rejected rather than rescaled.
    """
    known = {cat.id for cat in categories}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"Weight override for unknown categories: {unknown}")

    out = [
        CategoryDefinition(
            cat.id, cat.name, cat.description, int(overrides.get(cat.id, cat.weight))
        )
        for cat in categories
    ]
    if overrides:
        log.info("Applied category weight overrides: %s", dict(overrides))
    validate_category_weights(out)
    return out


def select_categories(
    categories: Sequence[CategoryDefinition], selected: Iterable[str] | None
) -> list[CategoryDefinition]:
    """
    Filter the catalog down to the selected ids, keeping catalog order.

    An empty or missing selection means every category.
    """
    wanted = list(selected or [])
    if not wanted:
        return list(categories)

    known = {cat.id for cat in categories}
    unknown = [c for c in wanted if c not in known]
    if unknown:
        raise ConfigurationError(f"Unknown categories: {', '.join(unknown)}")
    return [cat for cat in categories if cat.id in wanted]
