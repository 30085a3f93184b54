# Content rules: thin content and misplaced head markup.

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Comment, Doctype

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

WORD_COUNT_FAIL = 100
WORD_COUNT_WARN = 300
_INVISIBLE = {"script", "style", "noscript", "template", "head", "title"}
_WORD = re.compile(r"\w+(?:['-]\w+)*")


def visible_text(soup: BeautifulSoup) -> str:
    """Text a reader would see in the body; scripts, styles and comments are skipped."""
    root = soup.body or soup
    parts = []
    for node in root.find_all(string=True):
        if isinstance(node, (Comment, Doctype)):
            continue
        if any(parent.name in _INVISIBLE for parent in node.parents):
            continue
        parts.append(str(node))
    return " ".join(parts)


def word_count(soup: BeautifulSoup) -> int:
    return len(_WORD.findall(visible_text(soup)))


def check_word_count(context: AuditContext) -> RuleResult:
    rule_id = "content-word-count"
    words = word_count(context.soup)
    details = {"words": words}
    if words < WORD_COUNT_FAIL:
        return failed(rule_id, f"Thin content: only {words} words", details)
    if words < WORD_COUNT_WARN:
        return warned(rule_id, f"Page has {words} words; aim for {WORD_COUNT_WARN}+", details)
    return passed(rule_id, f"Page has {words} words", details)


def check_meta_in_body(context: AuditContext) -> RuleResult:
    rule_id = "content-meta-in-body"
    body = context.soup.body
    misplaced = []
    if body is not None:
        for tag in body.find_all("meta"):
            # microdata <meta itemprop> is valid in the body
            if tag.has_attr("itemprop"):
                continue
            misplaced.append(tag.get("name") or tag.get("property") or tag.get("http-equiv") or "meta")
    if misplaced:
        return failed(
            rule_id,
            f"{len(misplaced)} <meta> tag(s) found in <body>",
            {"tags": misplaced[:10]},
        )
    return passed(rule_id, "No <meta> tags in <body>")


RULES = (
    AuditRule("content-word-count", "Word Count", "content", check_word_count,
              "Flags thin content", weight=2),
    AuditRule("content-meta-in-body", "Meta Tags in Body", "content", check_meta_in_body,
              "Checks <meta> tags sit in <head>, where crawlers read them"),
)
