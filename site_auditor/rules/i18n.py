# Internationalization rules.

from __future__ import annotations

import re

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

# "en", "en-US", "zh-Hant-TW"
LANG_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z]{2,4})?(-[A-Za-z0-9]+)?$")


def check_lang_attribute(context: AuditContext) -> RuleResult:
    rule_id = "i18n-lang-attribute"
    html = context.soup.find("html")
    if html is None:
        return failed(rule_id, "No <html> element found", {"found": False})

    lang = (html.get("lang") or "").strip()
    if not lang:
        return failed(rule_id, "Missing or empty lang attribute on <html>", {"found": True, "lang": None})
    if not LANG_PATTERN.match(lang):
        return warned(
            rule_id,
            f'The lang attribute "{lang}" may not be a valid language tag',
            {"found": True, "lang": lang, "valid_format": False},
        )
    return passed(
        rule_id, f'HTML lang attribute is "{lang}"', {"found": True, "lang": lang, "valid_format": True}
    )


def check_hreflang(context: AuditContext) -> RuleResult:
    rule_id = "i18n-hreflang"
    alternates = context.soup.find_all("link", rel="alternate", hreflang=True)
    if not alternates:
        return passed(rule_id, "No hreflang alternates declared", {"count": 0})

    langs = [str(tag.get("hreflang")).lower() for tag in alternates]
    details = {"count": len(langs), "languages": langs}
    if "x-default" not in langs:
        return warned(rule_id, "hreflang alternates lack an x-default", details)
    return passed(rule_id, f"{len(langs)} hreflang alternates declared", details)


RULES = (
    AuditRule("i18n-lang-attribute", "HTML Lang Attribute", "i18n", check_lang_attribute,
              "Checks that <html> declares a valid lang attribute", weight=2),
    AuditRule("i18n-hreflang", "Hreflang", "i18n", check_hreflang,
              "Checks hreflang alternates include x-default"),
)
