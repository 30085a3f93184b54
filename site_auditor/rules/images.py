# Image rules over the extracted image list.

from __future__ import annotations

from site_auditor.models import AuditContext, AuditRule, RuleResult, failed, passed, warned
from site_auditor.scoring import round_half_up


def _share_score(ok: int, total: int) -> int:
    return round_half_up(100 * ok / total) if total else 100


def check_alt_text(context: AuditContext) -> RuleResult:
    rule_id = "images-alt-text"
    total = len(context.images)
    if total == 0:
        return passed(rule_id, "No images on page", {"images": 0})

    missing = [img.src for img in context.images if not img.has_alt]
    details = {"images": total, "missing": missing[:10]}
    if not missing:
        return passed(rule_id, f"All {total} images have alt attributes", details)
    score = _share_score(total - len(missing), total)
    if len(missing) == total:
        return failed(rule_id, "No image has an alt attribute", details)
    return warned(rule_id, f"{len(missing)} of {total} images lack alt", details, score=score)


def check_dimensions(context: AuditContext) -> RuleResult:
    rule_id = "images-dimensions"
    total = len(context.images)
    if total == 0:
        return passed(rule_id, "No images on page", {"images": 0})

    missing = [img.src for img in context.images if not (img.width and img.height)]
    details = {"images": total, "missing": missing[:10]}
    if missing:
        return warned(
            rule_id,
            f"{len(missing)} image(s) without width/height (layout shift risk)",
            details,
            score=_share_score(total - len(missing), total),
        )
    return passed(rule_id, "All images declare width and height", details)


RULES = (
    AuditRule("images-alt-text", "Image Alt Text", "images", check_alt_text,
              "Checks images carry alt attributes", weight=3),
    AuditRule("images-dimensions", "Image Dimensions", "images", check_dimensions,
              "Checks images declare width and height"),
)
