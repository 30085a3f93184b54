# Mobile rules.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned


def check_viewport(context: AuditContext) -> RuleResult:
    rule_id = "mobile-viewport"
    tag = context.soup.find("meta", attrs={"name": "viewport"})
    if tag is None:
        return failed(rule_id, 'No <meta name="viewport"> tag found', {"found": False})
    content = (tag.get("content") or "").strip()
    if not content:
        return failed(rule_id, "Viewport meta tag has no content", {"found": True, "empty": True})
    if "width=device-width" not in content.replace(" ", "").lower():
        return warned(
            rule_id, "Viewport does not set width=device-width", {"found": True, "viewport": content}
        )
    if "user-scalable=no" in content.replace(" ", "").lower():
        return warned(rule_id, "Viewport disables zooming", {"found": True, "viewport": content})
    return passed(rule_id, "Viewport meta tag is present", {"found": True, "viewport": content})


RULES = (
    AuditRule("mobile-viewport", "Viewport Meta Tag", "mobile", check_viewport,
              "Checks for a responsive viewport declaration"),
)
