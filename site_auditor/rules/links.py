# Link rules over the extracted link list.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

GENERIC_ANCHORS = {"click here", "here", "read more", "more", "link", "this"}


def check_internal_links(context: AuditContext) -> RuleResult:
    rule_id = "links-internal"
    count = len(context.internal_links)
    if count == 0:
        return failed(rule_id, "Page has no internal links", {"internal": 0})
    if count < 3:
        return warned(rule_id, f"Page has only {count} internal link(s)", {"internal": count})
    return passed(rule_id, f"Page has {count} internal links", {"internal": count})


def check_anchor_text(context: AuditContext) -> RuleResult:
    rule_id = "links-anchor-text"
    if not context.links:
        return passed(rule_id, "No links to check", {"links": 0})

    empty = [link.href for link in context.links if not link.text.strip()]
    generic = [link.href for link in context.links if link.text.strip().lower() in GENERIC_ANCHORS]
    details = {"links": len(context.links), "empty": empty[:10], "generic": generic[:10]}
    if empty:
        return failed(rule_id, f"{len(empty)} link(s) have no anchor text", details)
    if generic:
        return warned(rule_id, f"{len(generic)} link(s) use generic anchor text", details)
    return passed(rule_id, "All links have descriptive anchor text", details)


def check_internal_nofollow(context: AuditContext) -> RuleResult:
    rule_id = "links-internal-nofollow"
    nofollow = [link.href for link in context.internal_links if link.is_nofollow]
    if nofollow:
        return warned(
            rule_id,
            f"{len(nofollow)} internal link(s) are nofollow",
            {"urls": nofollow[:10]},
        )
    return passed(rule_id, "No internal nofollow links")


RULES = (
    AuditRule("links-internal", "Internal Links", "links", check_internal_links,
              "Checks the page links to other pages on the site", weight=2),
    AuditRule("links-anchor-text", "Anchor Text", "links", check_anchor_text,
              "Checks links have descriptive anchor text"),
    AuditRule("links-internal-nofollow", "Internal Nofollow", "links", check_internal_nofollow,
              "Flags rel=nofollow on internal links"),
)
