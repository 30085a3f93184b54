# site_auditor/ui.py
# Presentation-only utilities for CLI output.
from __future__ import annotations

from typing import IO, Iterable, Mapping, Sequence

from site_auditor.models import AuditResult, CategoryDefinition, CategoryResult
from site_auditor.suggestions import fix_suggestion

_STATUS_MARK = {"pass": "PASS", "warn": "WARN", "fail": "FAIL"}


def _writeln(text: str = "", *, file: IO[str]) -> None:
    file.write(text + "\n")


def render_audit_header(url: str, crawl: bool, *, file: IO[str]) -> None:
    mode = "Crawling and auditing" if crawl else "Auditing"
    _writeln(f"{mode}: {url}...", file=file)


def render_score_line(result: AuditResult, *, file: IO[str]) -> None:
    pages = f" across {result.crawled_pages} pages" if result.crawled_pages > 1 else ""
    _writeln(f"\nOverall score: {result.overall_score}/100{pages}", file=file)


def render_category_section(
    results: Sequence[CategoryResult],
    names: Mapping[str, str],
    *,
    verbose: bool = False,
    file: IO[str],
) -> None:
    if not results:
        return
    _writeln("\n--- Categories ---", file=file)
    for cr in results:
        name = names.get(cr.category_id, cr.category_id)
        if not cr.results:
            _writeln(f"- {name:<22} (no rules)", file=file)
            continue
        _writeln(
            f"- {name:<22} {cr.score:>3}  "
            f"pass={cr.pass_count} warn={cr.warn_count} fail={cr.fail_count}",
            file=file,
        )
        for r in cr.results:
            if r.status == "pass" and not verbose:
                continue
            where = f" <{r.page_url}>" if verbose and r.page_url else ""
            _writeln(f"    [{_STATUS_MARK[r.status]}] {r.rule_id}: {r.message}{where}", file=file)
            if r.status != "pass":
                _writeln(f"           fix: {fix_suggestion(r.rule_id)}", file=file)


def render_errors_section(errors: Iterable[str], *, file: IO[str]) -> None:
    errs = list(errors)
    if not errs:
        return
    _writeln("\n--- Pages Skipped ---", file=file)
    for e in errs:
        _writeln(f"- {e}", file=file)


def render_category_table(
    categories: Sequence[CategoryDefinition],
    rule_counts: Mapping[str, int],
    *,
    file: IO[str],
) -> None:
    for cat in categories:
        _writeln(
            f"{cat.id:<10} {cat.weight:>3}%  {rule_counts.get(cat.id, 0):>2} rules  {cat.name}",
            file=file,
        )
