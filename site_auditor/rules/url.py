# URL structure rules.

from __future__ import annotations

from urllib.parse import urlparse

from site_auditor.models import AuditContext, AuditRule, RuleResult, passed, warned

MAX_URL_LENGTH = 100


def check_url_length(context: AuditContext) -> RuleResult:
    rule_id = "url-length"
    length = len(context.url)
    if length > MAX_URL_LENGTH:
        return warned(rule_id, f"URL is {length} characters long", {"length": length})
    return passed(rule_id, f"URL is {length} characters long", {"length": length})


def check_url_hygiene(context: AuditContext) -> RuleResult:
    rule_id = "url-hygiene"
    path = urlparse(context.url).path
    problems = []
    if path != path.lower():
        problems.append("uppercase")
    if "_" in path:
        problems.append("underscores")
    if "//" in path:
        problems.append("double slashes")
    if " " in path or "%20" in path:
        problems.append("spaces")
    if problems:
        return warned(rule_id, f"URL path contains {', '.join(problems)}", {"problems": problems})
    return passed(rule_id, "URL path is clean", {"problems": []})


RULES = (
    AuditRule("url-length", "URL Length", "url", check_url_length,
              "Checks URLs stay reasonably short"),
    AuditRule("url-hygiene", "URL Hygiene", "url", check_url_hygiene,
              "Checks paths are lowercase and hyphenated"),
)
