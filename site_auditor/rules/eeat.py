# E-E-A-T signals: who wrote the page and how to reach them.

from __future__ import annotations

import re

from site_auditor.models import AuditContext, AuditRule, RuleResult, passed, warned

_CONTACT_HREF = re.compile(r"(contact|about)", re.IGNORECASE)


def check_author_info(context: AuditContext) -> RuleResult:
    rule_id = "eeat-author-info"
    soup = context.soup
    signals = []
    meta = soup.find("meta", attrs={"name": "author"})
    if meta is not None and (meta.get("content") or "").strip():
        signals.append("meta")
    if soup.find(["a", "link"], rel="author") is not None:
        signals.append("rel")
    if soup.find(attrs={"itemprop": "author"}) is not None:
        signals.append("microdata")
    if soup.find(class_=re.compile(r"\b(author|byline)\b")) is not None:
        signals.append("byline")

    if signals:
        return passed(rule_id, "Author information found", {"signals": signals})
    return warned(rule_id, "No author information found", {"signals": []})


def check_contact_info(context: AuditContext) -> RuleResult:
    rule_id = "eeat-contact-info"
    for link in context.links:
        if _CONTACT_HREF.search(link.href) and link.is_internal:
            return passed(rule_id, "Links to a contact or about page", {"href": link.href})
    for tag in context.soup.find_all("a", href=True):
        if tag["href"].lower().startswith(("mailto:", "tel:")):
            return passed(rule_id, "Offers direct contact details", {"href": tag["href"]})
    return warned(rule_id, "No contact or about page linked", {"href": None})


RULES = (
    AuditRule("eeat-author-info", "Author Info", "eeat", check_author_info,
              "Checks the page names its author"),
    AuditRule("eeat-contact-info", "Contact Info", "eeat", check_contact_info,
              "Checks the page links to contact or about information"),
)
