# Core SEO rules: title, meta description, canonical, H1, robots directives.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

TITLE_MIN, TITLE_MAX = 10, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 50, 160


def _meta_content(context: AuditContext, name: str) -> str | None:
    tag = context.soup.find("meta", attrs={"name": name})
    if tag is None:
        return None
    return (tag.get("content") or "").strip()


def check_title(context: AuditContext) -> RuleResult:
    rule_id = "core-title"
    tag = context.soup.find("title")
    title = tag.get_text(strip=True) if tag else ""
    if not title:
        return failed(rule_id, "No <title> found or title is empty", {"found": False})

    length = len(title)
    details = {"found": True, "title": title, "length": length}
    if length < TITLE_MIN or length > TITLE_MAX:
        return warned(
            rule_id,
            f"Title is {length} characters; aim for {TITLE_MIN}-{TITLE_MAX}",
            details,
        )
    return passed(rule_id, f"Title is present ({length} characters)", details)


def check_meta_description(context: AuditContext) -> RuleResult:
    rule_id = "core-meta-description"
    content = _meta_content(context, "description")
    if content is None:
        return failed(rule_id, 'No <meta name="description"> found', {"found": False})
    if not content:
        return failed(rule_id, "Meta description is empty", {"found": True, "empty": True})

    length = len(content)
    details = {"found": True, "length": length}
    if length < DESCRIPTION_MIN or length > DESCRIPTION_MAX:
        return warned(
            rule_id,
            f"Meta description is {length} characters; aim for "
            f"{DESCRIPTION_MIN}-{DESCRIPTION_MAX}",
            details,
        )
    return passed(rule_id, "Meta description is present", details)


def check_canonical(context: AuditContext) -> RuleResult:
    rule_id = "core-canonical"
    tag = context.soup.find("link", rel="canonical")
    if tag is None:
        return failed(rule_id, 'No <link rel="canonical"> tag found', {"found": False})
    href = (tag.get("href") or "").strip()
    if not href:
        return failed(
            rule_id, "Canonical link tag exists but has no href", {"found": True, "empty": True}
        )
    return passed(rule_id, "Canonical URL tag is present", {"found": True, "canonical": href})


def check_h1(context: AuditContext) -> RuleResult:
    rule_id = "core-h1"
    h1s = [h.get_text(strip=True) for h in context.soup.find_all("h1")]
    if not h1s:
        return failed(rule_id, "No <h1> heading found", {"count": 0})
    if len(h1s) > 1:
        return warned(rule_id, f"Found {len(h1s)} <h1> headings; use exactly one", {"count": len(h1s)})
    if not h1s[0]:
        return warned(rule_id, "The <h1> heading is empty", {"count": 1, "empty": True})
    return passed(rule_id, "Exactly one <h1> heading", {"count": 1, "text": h1s[0]})


def robots_directives(context: AuditContext) -> list[str]:
    """Directives from the robots meta tag and the X-Robots-Tag header, lowercased."""
    directives = []
    for source in (_meta_content(context, "robots"), context.headers.get("x-robots-tag")):
        if source:
            directives.extend(d.strip().lower() for d in source.split(","))
    return directives


def is_noindex(directives: list[str]) -> bool:
    return "noindex" in directives or "none" in directives


def check_indexable(context: AuditContext) -> RuleResult:
    """A page telling robots not to index it scores zero in an SEO audit."""
    rule_id = "core-indexable"
    directives = robots_directives(context)

    if is_noindex(directives):
        return failed(rule_id, "Page is marked noindex", {"directives": directives})
    if "nofollow" in directives:
        return warned(rule_id, "Page is marked nofollow", {"directives": directives})
    return passed(rule_id, "Page is indexable", {"directives": directives})


RULES = (
    AuditRule("core-title", "Title Tag", "core", check_title,
              "Checks the <title> is present and reasonably sized", weight=3),
    AuditRule("core-meta-description", "Meta Description", "core", check_meta_description,
              "Checks the meta description is present and reasonably sized", weight=2),
    AuditRule("core-canonical", "Canonical URL Present", "core", check_canonical,
              'Checks that a <link rel="canonical"> tag exists'),
    AuditRule("core-h1", "Single H1", "core", check_h1,
              "Checks the page has exactly one non-empty <h1>", weight=2),
    AuditRule("core-indexable", "Indexable", "core", check_indexable,
              "Checks robots meta and X-Robots-Tag for noindex", weight=3),
)
