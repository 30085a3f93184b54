# Implements the weighted scoring and multi-page aggregation.

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence

from site_auditor.models import (
    AuditResult,
    CategoryDefinition,
    CategoryResult,
    RuleResult,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (Python's round() goes to even)."""
    return int(math.floor(value + 0.5))


def category_score(
    category_id: str,
    results: Sequence[RuleResult],
    rule_weights: Mapping[str, int] | None = None,
) -> CategoryResult:
    """
    Reduce one category's ordered RuleResults to a CategoryResult.

    score = sum(weight_r * score_r) / sum(weight_r), rounded half-up.

    Weights come from each rule's declared in-category weight; results for
    rules missing from `rule_weights` weigh 1. With equal weights this is the
    arithmetic mean. An empty list scores 100: nothing was found wrong.
    """
    rule_weights = rule_weights or {}
    pass_count = sum(1 for r in results if r.status == "pass")
    warn_count = sum(1 for r in results if r.status == "warn")
    fail_count = sum(1 for r in results if r.status == "fail")

    total_weight = 0
    weighted = 0
    for r in results:
        w = rule_weights.get(r.rule_id, 1)
        total_weight += w
        weighted += w * r.score

    if total_weight > 0:
        score = round_half_up(weighted / total_weight)
    else:
        score = 100
    score = max(0, min(100, score))  # Clamp score between 0 and 100

    return CategoryResult(
        category_id=category_id,
        score=score,
        pass_count=pass_count,
        warn_count=warn_count,
        fail_count=fail_count,
        results=list(results),
    )


def overall_score(
    category_results: Sequence[CategoryResult],
    categories: Sequence[CategoryDefinition],
) -> int:
    """
    Weighted average of category scores by category weight.

    Only categories that produced at least one RuleResult take part, and the
    sum is divided by their combined weight. With the whole catalog that
    combined weight is 100, so e.g. weights 60/40 and scores 80/50 give
    round(0.6 * 80 + 0.4 * 50) = 68.

    If every participating category has weight 0, their plain mean is used.
    No participating category at all gives 0.
    """
    weights = {cat.id: cat.weight for cat in categories}
    participating = [cr for cr in category_results if cr.results]
    if not participating:
        return 0

    total_weight = 0
    weighted = 0
    for cr in participating:
        w = weights.get(cr.category_id, 0)
        total_weight += w
        weighted += w * cr.score

    if total_weight == 0:
        return round_half_up(sum(cr.score for cr in participating) / len(participating))
    return round_half_up(weighted / total_weight)


def pool_results(
    per_page: Iterable[Sequence[CategoryResult]],
    categories: Sequence[CategoryDefinition],
) -> dict[str, list[RuleResult]]:
    """
    Concatenate every page's results per category into one flat list.

    Each (rule, page) instance counts once and equally; there is no page-level
    weighting. Page order is the iteration order of `per_page`, and rule order
    inside a page is preserved.
    """
    pooled: dict[str, list[RuleResult]] = {cat.id: [] for cat in categories}
    for page_results in per_page:
        for cr in page_results:
            bucket = pooled.get(cr.category_id)
            if bucket is not None:
                bucket.extend(cr.results)
    return pooled


def score_pooled(
    pooled: Mapping[str, Sequence[RuleResult]],
    categories: Sequence[CategoryDefinition],
    rule_weights: Mapping[str, int] | None = None,
) -> list[CategoryResult]:
    """Score pooled results, emitting categories in catalog order."""
    return [
        category_score(cat.id, pooled.get(cat.id, []), rule_weights)
        for cat in categories
    ]


def build_audit_result(
    url: str,
    category_results: Sequence[CategoryResult],
    categories: Sequence[CategoryDefinition],
    timestamp: str,
    crawled_pages: int,
    errors: Sequence[str] | None = None,
) -> AuditResult:
    return AuditResult(
        url=url,
        overall_score=overall_score(category_results, categories),
        category_results=list(category_results),
        timestamp=timestamp,
        crawled_pages=crawled_pages,
        errors=list(errors or []),
    )
