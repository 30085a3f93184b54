# Social metadata rules: Open Graph and Twitter Cards.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

OG_REQUIRED = ("og:title", "og:type", "og:image", "og:url")


def check_open_graph(context: AuditContext) -> RuleResult:
    rule_id = "social-open-graph"
    found = {
        tag.get("property"): (tag.get("content") or "").strip()
        for tag in context.soup.find_all("meta", attrs={"property": True})
        if str(tag.get("property", "")).startswith("og:")
    }
    missing = [p for p in OG_REQUIRED if not found.get(p)]
    details = {"found": sorted(found), "missing": missing}
    if not found:
        return failed(rule_id, "No Open Graph tags", details)
    if missing:
        return warned(rule_id, f"Missing Open Graph tags: {', '.join(missing)}", details)
    return passed(rule_id, "Open Graph tags are complete", details)


def check_twitter_card(context: AuditContext) -> RuleResult:
    rule_id = "social-twitter-card"
    tag = context.soup.find("meta", attrs={"name": "twitter:card"})
    if tag is None or not (tag.get("content") or "").strip():
        return warned(rule_id, "No twitter:card meta tag", {"found": False})
    return passed(rule_id, f"Twitter card: {tag.get('content').strip()}", {"found": True})


RULES = (
    AuditRule("social-open-graph", "Open Graph", "social", check_open_graph,
              "Checks the core Open Graph properties", weight=2),
    AuditRule("social-twitter-card", "Twitter Card", "social", check_twitter_card,
              "Checks for a twitter:card meta tag"),
)
