# Crawlability rules: conflicting indexing signals on one page.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned
from site_auditor.rules.core import is_noindex, robots_directives
from site_auditor.rules.schema import json_ld_blocks
from site_auditor.urls import normalize_url, resolve_href


def _canonical_url(context: AuditContext) -> str | None:
    tag = context.soup.find("link", rel="canonical")
    if tag is None:
        return None
    return resolve_href(context.url, tag.get("href"))


def check_noindex_canonical_conflict(context: AuditContext) -> RuleResult:
    """noindex plus a canonical pointing elsewhere sends search engines two opposite signals."""
    rule_id = "crawl-indexability-conflict"
    directives = robots_directives(context)
    canonical = _canonical_url(context)
    details = {"directives": directives, "canonical": canonical}
    if not is_noindex(directives) or canonical is None:
        return passed(rule_id, "No conflicting indexability signals", details)
    if normalize_url(canonical) != normalize_url(context.url):
        return failed(
            rule_id,
            "Page is noindex but its canonical points to another URL",
            details,
        )
    return warned(rule_id, "Page is noindex but declares itself canonical", details)


def check_schema_noindex_conflict(context: AuditContext) -> RuleResult:
    rule_id = "crawl-schema-noindex"
    if is_noindex(robots_directives(context)) and json_ld_blocks(context):
        return warned(
            rule_id,
            "Page is noindex but carries structured data that will never be shown",
            {"structured_data": True},
        )
    return passed(rule_id, "Structured data and indexing directives agree")


RULES = (
    AuditRule("crawl-indexability-conflict", "Indexability Conflict", "crawl",
              check_noindex_canonical_conflict,
              "Flags noindex pages whose canonical disagrees", weight=2),
    AuditRule("crawl-schema-noindex", "Schema on Noindex Page", "crawl",
              check_schema_noindex_conflict,
              "Flags structured data on pages excluded from the index"),
)
