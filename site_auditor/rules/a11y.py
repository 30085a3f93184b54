# Accessibility rules that can be read from static HTML.

from __future__ import annotations

from bs4 import Tag

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned
from site_auditor.scoring import round_half_up

_UNLABELLED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}


def _has_accessible_name(tag: Tag) -> bool:
    return bool(
        (tag.get("aria-label") or "").strip()
        or tag.get("aria-labelledby")
        or (tag.get("title") or "").strip()
    )


def check_form_labels(context: AuditContext) -> RuleResult:
    rule_id = "a11y-form-labels"
    soup = context.soup
    labelled_ids = {label.get("for") for label in soup.find_all("label") if label.get("for")}

    fields = [
        tag
        for tag in soup.find_all(["input", "select", "textarea"])
        if (tag.get("type") or "text").lower() not in _UNLABELLED_INPUT_TYPES
    ]
    if not fields:
        return passed(rule_id, "No form fields on page", {"fields": 0})

    unlabelled = [
        tag.get("name") or tag.get("id") or tag.name
        for tag in fields
        if not (
            (tag.get("id") and tag.get("id") in labelled_ids)
            or tag.find_parent("label") is not None
            or _has_accessible_name(tag)
        )
    ]
    details = {"fields": len(fields), "unlabelled": unlabelled[:10]}
    if not unlabelled:
        return passed(rule_id, f"All {len(fields)} form fields are labelled", details)
    if len(unlabelled) == len(fields):
        return failed(rule_id, "No form field has a label", details)
    score = round_half_up(100 * (len(fields) - len(unlabelled)) / len(fields))
    return warned(rule_id, f"{len(unlabelled)} form field(s) lack a label", details, score=score)


def check_button_names(context: AuditContext) -> RuleResult:
    rule_id = "a11y-button-names"
    nameless = []
    for button in context.soup.find_all("button"):
        if button.get_text(strip=True) or _has_accessible_name(button):
            continue
        if any((img.get("alt") or "").strip() for img in button.find_all("img")):
            continue
        nameless.append(button.get("id") or button.get("class") or "button")
    if nameless:
        return warned(
            rule_id,
            f"{len(nameless)} button(s) have no accessible name",
            {"count": len(nameless)},
        )
    return passed(rule_id, "All buttons have accessible names")


RULES = (
    AuditRule("a11y-form-labels", "Form Labels", "a11y", check_form_labels,
              "Checks form fields have an associated label", weight=2),
    AuditRule("a11y-button-names", "Button Names", "a11y", check_button_names,
              "Checks buttons have text or an aria-label"),
)
