# Technical rules: HTTP status, content type, doctype.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned


def check_status_code(context: AuditContext) -> RuleResult:
    rule_id = "technical-status-code"
    status = context.status_code
    details = {"status": status}
    if 200 <= status < 300:
        return passed(rule_id, f"Page returned HTTP {status}", details)
    if 300 <= status < 400:
        return warned(rule_id, f"Page returned redirect HTTP {status}", details)
    return failed(rule_id, f"Page returned HTTP {status}", details)


def check_content_type(context: AuditContext) -> RuleResult:
    rule_id = "technical-content-type"
    ctype = context.headers.get("content-type", "")
    if not ctype:
        return warned(rule_id, "No Content-Type header", {"content_type": None})
    if "text/html" not in ctype.lower():
        return failed(rule_id, f"Content-Type is {ctype}, not text/html", {"content_type": ctype})
    if "charset" not in ctype.lower():
        return warned(rule_id, "Content-Type does not declare a charset", {"content_type": ctype})
    return passed(rule_id, "Content-Type is text/html with a charset", {"content_type": ctype})


def check_doctype(context: AuditContext) -> RuleResult:
    rule_id = "technical-doctype"
    if context.html.lstrip()[:15].lower().startswith("<!doctype html"):
        return passed(rule_id, "HTML5 doctype declared")
    return warned(rule_id, "Missing <!DOCTYPE html> declaration")


RULES = (
    AuditRule("technical-status-code", "HTTP Status", "technical", check_status_code,
              "Checks the page responds with a 2xx status", weight=3),
    AuditRule("technical-content-type", "Content-Type Header", "technical", check_content_type,
              "Checks the page is served as text/html with a charset"),
    AuditRule("technical-doctype", "Doctype", "technical", check_doctype,
              "Checks for an HTML5 doctype"),
)
