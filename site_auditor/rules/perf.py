# Performance rules. Core Web Vitals are scored when the context carries them.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

# (good, poor) thresholds in ms, from web.dev
TTFB_THRESHOLDS = (800, 1800)
LCP_THRESHOLDS = (2500, 4000)
HTML_SIZE_WARN = 100 * 1024
HTML_SIZE_FAIL = 500 * 1024


def check_response_time(context: AuditContext) -> RuleResult:
    rule_id = "perf-response-time"
    ms = context.cwv.ttfb if context.cwv.ttfb is not None else context.response_time
    good, poor = TTFB_THRESHOLDS
    details = {"ms": ms}
    if ms <= good:
        return passed(rule_id, f"Server responded in {ms:.0f}ms", details)
    if ms <= poor:
        return warned(rule_id, f"Server responded in {ms:.0f}ms (target {good}ms)", details)
    return failed(rule_id, f"Server responded in {ms:.0f}ms (over {poor}ms)", details)


def check_lcp(context: AuditContext) -> RuleResult:
    rule_id = "perf-lcp"
    lcp = context.cwv.lcp
    if lcp is None:
        # Not measured; neutral rather than a penalty.
        return passed(rule_id, "LCP not measured", {"measured": False})
    good, poor = LCP_THRESHOLDS
    details = {"measured": True, "lcp": lcp}
    if lcp <= good:
        return passed(rule_id, f"LCP is {lcp:.0f}ms", details)
    if lcp <= poor:
        return warned(rule_id, f"LCP is {lcp:.0f}ms (target {good}ms)", details)
    return failed(rule_id, f"LCP is {lcp:.0f}ms (over {poor}ms)", details)


def check_html_size(context: AuditContext) -> RuleResult:
    rule_id = "perf-html-size"
    size = len(context.html.encode("utf-8"))
    details = {"bytes": size}
    if size > HTML_SIZE_FAIL:
        return failed(rule_id, f"HTML document is {size // 1024}KB", details)
    if size > HTML_SIZE_WARN:
        return warned(rule_id, f"HTML document is {size // 1024}KB", details)
    return passed(rule_id, f"HTML document is {size // 1024}KB", details)


RULES = (
    AuditRule("perf-response-time", "Server Response Time", "perf", check_response_time,
              "Checks time to first byte", weight=2),
    AuditRule("perf-lcp", "Largest Contentful Paint", "perf", check_lcp,
              "Scores LCP when a measurement is available", weight=2),
    AuditRule("perf-html-size", "HTML Size", "perf", check_html_size,
              "Checks the HTML document is not oversized"),
)
