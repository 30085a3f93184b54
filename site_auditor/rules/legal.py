# Legal compliance signals: privacy policy, terms, cookie consent.

from __future__ import annotations

import re

from site_auditor.models import AuditContext, AuditRule, LinkInfo, RuleResult, passed, warned

_PRIVACY = re.compile(r"privacy|datenschutz|confidentialit", re.IGNORECASE)
_TERMS = re.compile(r"terms|conditions|\btos\b|legal", re.IGNORECASE)

# Scripts that set tracking cookies, and the consent platforms that gate them.
_TRACKERS = ("googletagmanager.com", "google-analytics.com", "connect.facebook.net", "hotjar.com")
_CONSENT = ("cookiebot", "onetrust", "cookieyes", "didomi", "quantcast", "usercentrics",
            "cookie-consent", "cookieconsent", "osano")


def _find_link(links: tuple[LinkInfo, ...], pattern: re.Pattern) -> LinkInfo | None:
    for link in links:
        if pattern.search(link.href) or pattern.search(link.text):
            return link
    return None


def check_privacy_policy(context: AuditContext) -> RuleResult:
    rule_id = "legal-privacy-policy"
    link = _find_link(context.links, _PRIVACY)
    if link is None:
        return warned(rule_id, "No privacy policy link found", {"found": False})
    return passed(rule_id, "Privacy policy is linked", {"found": True, "href": link.href})


def check_terms_of_service(context: AuditContext) -> RuleResult:
    rule_id = "legal-terms-of-service"
    link = _find_link(context.links, _TERMS)
    if link is None:
        return warned(rule_id, "No terms of service link found", {"found": False})
    return passed(rule_id, "Terms of service are linked", {"found": True, "href": link.href})


def check_cookie_consent(context: AuditContext) -> RuleResult:
    """Only pages that set cookies or load trackers need a consent mechanism."""
    rule_id = "legal-cookie-consent"
    html = context.html.lower()
    trackers = [t for t in _TRACKERS if t in html]
    sets_cookies = "set-cookie" in context.headers
    if not trackers and not sets_cookies:
        return passed(rule_id, "No cookies or trackers detected", {"needed": False})

    platforms = [c for c in _CONSENT if c in html]
    details = {"needed": True, "trackers": trackers, "consent": platforms}
    if platforms:
        return passed(rule_id, f"Cookie consent found ({platforms[0]})", details)
    return warned(rule_id, "Cookies or trackers in use without a consent mechanism", details)


RULES = (
    AuditRule("legal-privacy-policy", "Privacy Policy", "legal", check_privacy_policy,
              "Checks the page links to a privacy policy", weight=2),
    AuditRule("legal-terms-of-service", "Terms of Service", "legal", check_terms_of_service,
              "Checks the page links to terms of service"),
    AuditRule("legal-cookie-consent", "Cookie Consent", "legal", check_cookie_consent,
              "Checks pages that track visitors ask for consent"),
)
