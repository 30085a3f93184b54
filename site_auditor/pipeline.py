# site_auditor/pipeline.py
"""
Per-page audit pipeline.

For one AuditContext, runs every registered rule of each selected category in
registration order and scores the category.

Every rule runs under a per-rule timeout; plain functions run in a worker
thread. A rule that raises, times out, or returns something that is not a
RuleResult is recorded as a `fail` result with score 0. One broken rule never
aborts the category, the page, or the run.
"""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
from typing import Iterable, Sequence

from site_auditor.models import (
    AuditContext,
    AuditRule,
    CategoryDefinition,
    CategoryResult,
    RuleResult,
    failed,
)
from site_auditor.observer import AuditObserver, notify
from site_auditor.registry import RuleRegistry
from site_auditor.scoring import category_score

log = logging.getLogger(__name__)

DEFAULT_RULE_TIMEOUT = 10.0  # seconds


class AuditPipeline:
    def __init__(
        self,
        registry: RuleRegistry,
        categories: Sequence[CategoryDefinition],
        observer: AuditObserver | None = None,
        rule_timeout: float = DEFAULT_RULE_TIMEOUT,
    ):
        self.registry = registry
        self.categories = list(categories)
        self.observer = observer
        self.rule_timeout = rule_timeout

    def rule_weights(self) -> dict[str, int]:
        return {rule.id: rule.weight for rule in self.registry.all_rules()}

    async def run_categories(
        self,
        context: AuditContext,
        categories: Iterable[CategoryDefinition] | None = None,
    ) -> list[CategoryResult]:
        """Run the selected categories (default: all configured) against one page."""
        selected = list(categories) if categories is not None else self.categories
        weights = self.rule_weights()
        out: list[CategoryResult] = []

        for category in selected:
            notify(self.observer, "on_category_start", category, context.url)

            results: list[RuleResult] = []
            for rule in self.registry.rules_by_category(category.id):
                result = await self.run_rule(rule, context)
                results.append(result)
                notify(self.observer, "on_rule_complete", rule, result)

            cat_result = category_score(category.id, results, weights)
            out.append(cat_result)
            notify(self.observer, "on_category_complete", category, cat_result)

        return out

    async def _invoke(self, rule: AuditRule, context: AuditContext) -> object:
        # Sync rules go to a worker thread.
        if inspect.iscoroutinefunction(rule.run):
            return await rule.run(context)
        outcome = await asyncio.to_thread(rule.run, context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    async def run_rule(self, rule: AuditRule, context: AuditContext) -> RuleResult:
        """
        Run one rule under `rule_timeout`, converting any fault into a stamped
        `fail` result.

        Expiry is detected from `asyncio.wait`, not from the exception type, so
        a rule that raises its own TimeoutError is reported as a rule error.
        A timed-out sync rule keeps its worker thread until it returns, but
        the pipeline moves on immediately.
        """
        task = asyncio.ensure_future(self._invoke(rule, context))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.rule_timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if not done:
            task.cancel()
            log.warning(
                "Rule %s timed out after %.1fs on %s", rule.id, self.rule_timeout, context.url
            )
            outcome = failed(
                rule.id,
                f"Rule execution failed: timed out after {self.rule_timeout:g}s",
                {"error": "TimeoutError"},
            )
            return dataclasses.replace(outcome, page_url=context.url)

        try:
            outcome = task.result()
            if not isinstance(outcome, RuleResult):
                raise TypeError(
                    f"rule returned {type(outcome).__name__}, expected RuleResult"
                )
        except Exception as e:
            log.warning("Rule %s raised on %s: %r", rule.id, context.url, e)
            outcome = failed(
                rule.id,
                f"Rule execution failed: {str(e) or type(e).__name__}",
                {"error": type(e).__name__},
            )

        return dataclasses.replace(outcome, page_url=context.url)
