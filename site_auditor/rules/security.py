# Security rules: HTTPS, security headers, mixed content.

from __future__ import annotations

from urllib.parse import urlparse

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned
from site_auditor.scoring import round_half_up

SECURITY_HEADERS = (
    "strict-transport-security",
    "content-security-policy",
    "x-content-type-options",
    "x-frame-options",
    "referrer-policy",
)


def check_https(context: AuditContext) -> RuleResult:
    rule_id = "security-https"
    scheme = urlparse(context.url).scheme.lower()
    if scheme == "https":
        return passed(rule_id, "Page is served over HTTPS", {"scheme": scheme})
    return failed(rule_id, "Page is not served over HTTPS", {"scheme": scheme})


def check_security_headers(context: AuditContext) -> RuleResult:
    """Score is the share of recommended headers present."""
    rule_id = "security-headers"
    present = [h for h in SECURITY_HEADERS if h in context.headers]
    missing = [h for h in SECURITY_HEADERS if h not in context.headers]
    score = round_half_up(100 * len(present) / len(SECURITY_HEADERS))
    details = {"present": present, "missing": missing}
    if not missing:
        return passed(rule_id, "All recommended security headers are set", details)
    if not present:
        return failed(rule_id, "No recommended security headers are set", details)
    return warned(rule_id, f"Missing security headers: {', '.join(missing)}", details, score=score)


def check_mixed_content(context: AuditContext) -> RuleResult:
    rule_id = "security-mixed-content"
    if urlparse(context.url).scheme.lower() != "https":
        return passed(rule_id, "Not an HTTPS page", {"applicable": False})

    insecure = []
    for tag in context.soup.find_all(["img", "script", "iframe", "link", "source", "video", "audio"]):
        ref = tag.get("src") or tag.get("href") or ""
        if ref.lower().startswith("http://"):
            insecure.append(ref)
    if insecure:
        return failed(
            rule_id,
            f"{len(insecure)} resource(s) loaded over HTTP",
            {"applicable": True, "urls": insecure[:10]},
        )
    return passed(rule_id, "No mixed content", {"applicable": True})


RULES = (
    AuditRule("security-https", "HTTPS", "security", check_https,
              "Checks the page is served over HTTPS", weight=3),
    AuditRule("security-headers", "Security Headers", "security", check_security_headers,
              "Checks for recommended security response headers", weight=2),
    AuditRule("security-mixed-content", "Mixed Content", "security", check_mixed_content,
              "Checks HTTPS pages load no HTTP subresources", weight=2),
)
