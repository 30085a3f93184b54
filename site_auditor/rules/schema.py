# Structured data rules over JSON-LD blocks.

from __future__ import annotations

import json
from typing import Any, Iterator

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned

ORG_TYPES = {"Organization", "Corporation", "NGO", "GovernmentOrganization", "LocalBusiness"}
ORG_RECOMMENDED = ("url", "logo", "sameAs")


def json_ld_blocks(context: AuditContext) -> list[str]:
    """Raw text of every <script type="application/ld+json">, in document order."""
    return [
        tag.get_text().strip()
        for tag in context.soup.find_all("script", attrs={"type": "application/ld+json"})
    ]


def parse_json_ld(context: AuditContext) -> tuple[list[Any], list[dict[str, Any]]]:
    """Return (parsed documents, errors) for the page's JSON-LD blocks."""
    documents: list[Any] = []
    errors: list[dict[str, Any]] = []
    for index, raw in enumerate(json_ld_blocks(context)):
        if not raw:
            errors.append({"script_index": index, "error": "Empty JSON-LD script"})
            continue
        try:
            documents.append(json.loads(raw))
        except json.JSONDecodeError as e:
            errors.append({"script_index": index, "error": str(e)})
    return documents, errors


def _items(node: Any) -> Iterator[dict[str, Any]]:
    """Walk documents, @graph arrays and nested lists, yielding every typed object."""
    if isinstance(node, list):
        for child in node:
            yield from _items(child)
    elif isinstance(node, dict):
        if "@type" in node:
            yield node
        if "@graph" in node:
            yield from _items(node["@graph"])


def _types(item: dict[str, Any]) -> set[str]:
    value = item.get("@type")
    if isinstance(value, list):
        return {str(v) for v in value}
    return {str(value)}


def check_present(context: AuditContext) -> RuleResult:
    rule_id = "schema-present"
    count = len(json_ld_blocks(context))
    if count == 0:
        return warned(rule_id, "No JSON-LD structured data found", {"count": 0})
    return passed(rule_id, f"Found {count} JSON-LD block(s)", {"count": count})


def check_valid(context: AuditContext) -> RuleResult:
    rule_id = "schema-valid"
    blocks = json_ld_blocks(context)
    if not blocks:
        return warned(rule_id, "No JSON-LD scripts found to validate", {"found": False})

    documents, errors = parse_json_ld(context)
    details = {"total": len(blocks), "valid": len(documents), "invalid": errors}
    if not errors:
        return passed(rule_id, f"All {len(blocks)} JSON-LD script(s) contain valid JSON", details)
    if not documents:
        return failed(rule_id, f"All {len(blocks)} JSON-LD script(s) contain invalid JSON", details)
    return warned(
        rule_id, f"{len(errors)} of {len(blocks)} JSON-LD script(s) contain invalid JSON", details
    )


def check_organization(context: AuditContext) -> RuleResult:
    """Organization markup is optional; when present it needs a name."""
    rule_id = "schema-organization"
    documents, _ = parse_json_ld(context)
    orgs = [item for item in _items(documents) if _types(item) & ORG_TYPES]
    if not orgs:
        return passed(rule_id, "No Organization schema found (not required)", {"found": False})

    for org in orgs:
        if not org.get("name"):
            return warned(rule_id, "Organization schema is missing name", {"count": len(orgs)})

    missing = sorted({field for org in orgs for field in ORG_RECOMMENDED if not org.get(field)})
    if missing:
        return warned(
            rule_id,
            f"Organization schema could add: {', '.join(missing)}",
            {"count": len(orgs), "missing": missing},
            score=75,
        )
    return passed(rule_id, f"{len(orgs)} Organization schema(s) complete", {"count": len(orgs)})


RULES = (
    AuditRule("schema-present", "Structured Data Present", "schema", check_present,
              "Checks the page carries JSON-LD structured data", weight=2),
    AuditRule("schema-valid", "Structured Data Valid JSON", "schema", check_valid,
              "Checks every JSON-LD script parses as JSON", weight=3),
    AuditRule("schema-organization", "Organization Schema", "schema", check_organization,
              "Checks Organization markup has a name and brand fields"),
)
